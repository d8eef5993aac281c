import os
from dataclasses import dataclass

NOMINATIM_URL = os.environ.get("GROWTHMAP_NOMINATIM_URL", "https://nominatim.openstreetmap.org")
GROWTH_CSV = os.environ.get("GROWTHMAP_GROWTH_CSV", "https://lifecosts.github.io/suburb_growth_summary2.csv")
TIMEOUT = float(os.environ.get("GROWTHMAP_TIMEOUT", "15.0"))
RETRIES = int(os.environ.get("GROWTHMAP_RETRIES", "1"))
HOVER_COOLDOWN = float(os.environ.get("GROWTHMAP_HOVER_COOLDOWN", "3.0"))
USER_AGENT = os.environ.get("GROWTHMAP_USER_AGENT", "growthmap/0.1 (suburb growth lookup)")
DUPLICATE_POLICY = os.environ.get("GROWTHMAP_DUPLICATE_POLICY", "last")
LOG_LEVEL = os.environ.get("GROWTHMAP_LOG_LEVEL", "INFO")

ADDRESS_INFO_URL = os.environ.get("GROWTHMAP_ADDRESS_INFO_URL", "Address_Info.html")
SUBURB_INFO_URL = os.environ.get("GROWTHMAP_SUBURB_INFO_URL", "Suburb_Info.html")

# Nominatim request constants
COUNTRY_CODES = "au"
SEARCH_LIMIT = 5
REVERSE_ZOOM = 18

# Map zoom levels
ADDRESS_ZOOM = int(os.environ.get("GROWTHMAP_ADDRESS_ZOOM", "16"))  # at or above: show street address
SUBURB_VIEW_ZOOM = 14
ADDRESS_VIEW_ZOOM = 17


@dataclass
class Settings:
    nominatim_url: str = NOMINATIM_URL
    growth_csv: str = GROWTH_CSV
    timeout: float = TIMEOUT
    retries: int = RETRIES
    hover_cooldown: float = HOVER_COOLDOWN
    user_agent: str = USER_AGENT
    duplicate_policy: str = DUPLICATE_POLICY
    address_info_url: str = ADDRESS_INFO_URL
    suburb_info_url: str = SUBURB_INFO_URL
    address_zoom: int = ADDRESS_ZOOM

    @classmethod
    def from_env(cls) -> "Settings":
        """Re-read the environment; module constants are frozen at import."""
        env = os.environ
        return cls(
            nominatim_url=env.get("GROWTHMAP_NOMINATIM_URL", NOMINATIM_URL),
            growth_csv=env.get("GROWTHMAP_GROWTH_CSV", GROWTH_CSV),
            timeout=float(env.get("GROWTHMAP_TIMEOUT", TIMEOUT)),
            retries=int(env.get("GROWTHMAP_RETRIES", RETRIES)),
            hover_cooldown=float(env.get("GROWTHMAP_HOVER_COOLDOWN", HOVER_COOLDOWN)),
            user_agent=env.get("GROWTHMAP_USER_AGENT", USER_AGENT),
            duplicate_policy=env.get("GROWTHMAP_DUPLICATE_POLICY", DUPLICATE_POLICY),
            address_info_url=env.get("GROWTHMAP_ADDRESS_INFO_URL", ADDRESS_INFO_URL),
            suburb_info_url=env.get("GROWTHMAP_SUBURB_INFO_URL", SUBURB_INFO_URL),
            address_zoom=int(env.get("GROWTHMAP_ADDRESS_ZOOM", ADDRESS_ZOOM)),
        )
