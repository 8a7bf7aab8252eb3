# =============================================================================
# lib/geocoder.py - Forward Geocoding
# =============================================================================
# Resolves street addresses and zipcodes to coordinates using the
# OpenStreetMap Nominatim search API.
#
# Nominatim asks clients to identify themselves with a User-Agent and to keep
# the request rate low, so requests are made one at a time and network errors
# are retried with a linear backoff.
# =============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

# Constants
MAX_RETRIES = 3
RETRY_DELAY = 1.0


class GeocoderError(ApplicationError):
    """Raised when the geocoding service cannot be reached or answers with an error."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, code="GEOCODER_ERROR", **kwargs)


@dataclass
class GeocodedLocation:
    """A single geocoding match."""

    latitude: float
    longitude: float
    formatted_address: str
    street: str | None = None
    city: str | None = None
    state_code: str | None = None
    zipcode: str | None = None
    country_code: str | None = None

    @classmethod
    def from_nominatim(cls, item: dict[str, Any]) -> GeocodedLocation:
        """Build from one element of a Nominatim `jsonv2` response."""
        address = item.get("address") or {}

        street = address.get("road")
        if street and address.get("house_number"):
            street = f"{address['house_number']} {street}"

        # "ISO3166-2-lvl4": "US-MA" -> "MA"
        state_code = None
        iso_region = address.get("ISO3166-2-lvl4")
        if iso_region and "-" in iso_region:
            state_code = iso_region.split("-", 1)[1]

        country_code = address.get("country_code")

        return cls(
            latitude=float(item["lat"]),
            longitude=float(item["lon"]),
            formatted_address=item.get("display_name", ""),
            street=street,
            city=address.get("city") or address.get("town") or address.get("village"),
            state_code=state_code or address.get("state"),
            zipcode=address.get("postcode"),
            country_code=country_code.upper() if country_code else None,
        )

    def to_geojson(self) -> dict[str, Any]:
        """Location sub-document stored on a bootcamp (GeoJSON Point + descriptive fields)."""
        return {
            "type": "Point",
            "coordinates": [self.longitude, self.latitude],
            "formatted_address": self.formatted_address,
            "street": self.street,
            "city": self.city,
            "state": self.state_code,
            "zipcode": self.zipcode,
            "country": self.country_code,
        }


class Geocoder:
    """
    Nominatim search client.

    Example:
        geocoder = Geocoder(user_agent="DevCamperAPI/1.0")
        location = geocoder.geocode("233 Bay State Rd Boston MA 02215")
        if location:
            print(location.latitude, location.longitude)
    """

    def __init__(
        self,
        base_url: str = "https://nominatim.openstreetmap.org/search",
        user_agent: str = "DevCamperAPI/1.0",
        country: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        retry_delay: float = RETRY_DELAY,
    ):
        self.base_url = base_url
        self.country = country
        self.retry_delay = retry_delay
        self._client = httpx.Client(
            headers={"User-Agent": user_agent},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Any) -> Geocoder:
        return cls(
            base_url=settings.GEOCODER_URL,
            user_agent=settings.GEOCODER_USER_AGENT,
            country=settings.GEOCODER_COUNTRY,
            timeout=settings.GEOCODER_TIMEOUT,
        )

    def geocode(self, address: str) -> GeocodedLocation | None:
        """
        Resolve a free-form address.

        Returns:
            The best match, or None when nothing matched

        Raises:
            GeocoderError: If the service fails after MAX_RETRIES attempts
        """
        return self._search({"q": address})

    def geocode_zipcode(self, zipcode: str) -> GeocodedLocation | None:
        """Resolve a postal code, biased to the configured country."""
        params = {"postalcode": zipcode}
        if self.country:
            params["countrycodes"] = self.country
        return self._search(params)

    def close(self) -> None:
        self._client.close()

    def _search(self, params: dict[str, str]) -> GeocodedLocation | None:
        query = {**params, "format": "jsonv2", "addressdetails": "1", "limit": "1"}

        last_error = ""
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                response = self._client.get(self.base_url, params=query)
                if response.status_code == 200:
                    results = response.json()
                    if not results:
                        logger.warning(f"No geocoding match for {params}")
                        return None
                    return GeocodedLocation.from_nominatim(results[0])

                last_error = f"HTTP {response.status_code}"
                logger.warning(
                    f"Geocoding HTTP error ({response.status_code}) for {params} "
                    f"(Attempt {attempt}/{MAX_RETRIES})"
                )
            except httpx.HTTPError as e:
                last_error = str(e)
                logger.warning(f"Network error geocoding {params}: {e} (Attempt {attempt}/{MAX_RETRIES})")

            if attempt < MAX_RETRIES:
                time.sleep(self.retry_delay * attempt)

        logger.error(f"Failed to geocode {params} after {MAX_RETRIES} attempts")
        raise GeocoderError(
            f"Geocoding failed after {MAX_RETRIES} attempts: {last_error}",
            details={"params": params},
        )
