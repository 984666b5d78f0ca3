"""
Direct cancellation pages for well-known subscription services.

Free-text service names are matched exactly (name or alias, case-insensitive)
first, then by substring containment in either direction.
"""

from typing import Optional
from urllib.parse import quote, urlencode


KNOWN_SERVICES = [
    # Streaming
    {"service": "netflix", "url": "https://www.netflix.com/account", "aliases": ["netflix.com", "netflix streaming"]},
    {"service": "hulu", "url": "https://help.hulu.com/s/article/cancel-subscription", "aliases": ["hulu plus"]},
    {"service": "disney plus", "url": "https://www.disneyplus.com/account", "aliases": ["disney+", "disneyplus"]},
    {"service": "hbo max", "url": "https://www.hbomax.com/account", "aliases": ["hbo", "hbo max streaming"]},
    {"service": "paramount plus", "url": "https://www.paramountplus.com/account", "aliases": ["paramount+", "paramount", "cbs all access"]},
    {"service": "peacock", "url": "https://www.peacocktv.com/account", "aliases": ["nbc peacock", "peacock tv"]},
    {"service": "apple tv plus", "url": "https://tv.apple.com/account", "aliases": ["apple tv", "apple tv+"]},
    {"service": "youtube premium", "url": "https://www.youtube.com/paid_memberships", "aliases": ["youtube red", "youtube music premium"]},
    {"service": "crunchyroll", "url": "https://www.crunchyroll.com/account", "aliases": ["crunchyroll premium"]},
    {"service": "sling", "url": "https://www.sling.com/account", "aliases": ["sling tv"]},
    {"service": "twitch", "url": "https://www.twitch.tv/settings/subscriptions", "aliases": ["twitch turbo"]},
    # Music
    {"service": "spotify", "url": "https://www.spotify.com/account/subscription/", "aliases": ["spotify premium"]},
    {"service": "apple music", "url": "https://support.apple.com/en-us/HT202039", "aliases": ["itunes music"]},
    {"service": "tidal", "url": "https://tidal.com/account", "aliases": ["tidal hifi"]},
    {"service": "deezer", "url": "https://www.deezer.com/account", "aliases": ["deezer premium"]},
    {"service": "audible", "url": "https://www.audible.com/account/cancel-membership", "aliases": ["amazon audible"]},
    # Shopping and delivery
    {"service": "amazon prime", "url": "https://www.amazon.com/mc/account/manage-memberships-and-subscriptions", "aliases": ["prime", "prime video", "amazon prime video", "amazon"]},
    {"service": "kindle unlimited", "url": "https://www.amazon.com/kindle-dbs/hz/signup", "aliases": ["kindle"]},
    {"service": "doordash", "url": "https://www.doordash.com/account", "aliases": ["dashpass"]},
    {"service": "uber eats", "url": "https://www.ubereats.com/account", "aliases": ["ubereats", "uber one"]},
    {"service": "instacart", "url": "https://www.instacart.com/account", "aliases": ["instacart express", "instacart+"]},
    {"service": "walmart plus", "url": "https://www.walmart.com/account", "aliases": ["walmart+"]},
    # Software and productivity
    {"service": "adobe", "url": "https://www.adobe.com/account/cancel-subscription.html", "aliases": ["adobe creative cloud", "adobe cc", "photoshop", "premiere pro"]},
    {"service": "microsoft 365", "url": "https://account.microsoft.com/services", "aliases": ["office 365", "microsoft office", "onedrive"]},
    {"service": "notion", "url": "https://www.notion.so/help/cancel-your-subscription", "aliases": ["notion.so"]},
    {"service": "evernote", "url": "https://www.evernote.com/AccountSettings.action", "aliases": ["evernote premium"]},
    {"service": "dropbox", "url": "https://www.dropbox.com/account/billing", "aliases": ["dropbox plus", "dropbox professional"]},
    {"service": "google one", "url": "https://one.google.com/storage", "aliases": ["google drive", "google storage"]},
    {"service": "icloud", "url": "https://www.icloud.com/settings/", "aliases": ["icloud+", "icloud storage"]},
    {"service": "figma", "url": "https://www.figma.com/settings/billing", "aliases": ["figma professional"]},
    {"service": "canva", "url": "https://www.canva.com/account/billing", "aliases": ["canva pro"]},
    {"service": "grammarly", "url": "https://www.grammarly.com/settings", "aliases": ["grammarly premium"]},
    {"service": "zoom", "url": "https://zoom.us/account", "aliases": ["zoom pro", "zoom business"]},
    {"service": "slack", "url": "https://slack.com/account/settings", "aliases": ["slack workspace"]},
    {"service": "linkedin", "url": "https://www.linkedin.com/psettings/premium", "aliases": ["linkedin premium"]},
    {"service": "github", "url": "https://github.com/settings/billing", "aliases": ["github pro", "github copilot"]},
    {"service": "jetbrains", "url": "https://account.jetbrains.com/", "aliases": ["intellij", "pycharm", "webstorm"]},
    # Security
    {"service": "nordvpn", "url": "https://my.nordaccount.com/", "aliases": ["nord vpn"]},
    {"service": "expressvpn", "url": "https://www.expressvpn.com/account", "aliases": ["express vpn"]},
    {"service": "1password", "url": "https://1password.com/account", "aliases": []},
    {"service": "lastpass", "url": "https://www.lastpass.com/account", "aliases": ["lastpass premium"]},
    # Gaming
    {"service": "discord", "url": "https://discord.com/settings/subscriptions", "aliases": ["discord nitro"]},
    {"service": "playstation plus", "url": "https://www.playstation.com/en-us/account/", "aliases": ["ps plus", "psn"]},
    {"service": "xbox game pass", "url": "https://account.microsoft.com/services", "aliases": ["game pass", "xbox live"]},
    {"service": "nintendo switch online", "url": "https://accounts.nintendo.com/", "aliases": ["switch online"]},
    # Health
    {"service": "peloton", "url": "https://www.onepeloton.com/account", "aliases": ["peloton app"]},
    {"service": "strava", "url": "https://www.strava.com/account", "aliases": ["strava premium"]},
    {"service": "calm", "url": "https://www.calm.com/account", "aliases": ["calm app"]},
    {"service": "headspace", "url": "https://www.headspace.com/account", "aliases": ["headspace app"]},
    # News and education
    {"service": "new york times", "url": "https://www.nytimes.com/subscription", "aliases": ["nytimes", "ny times", "nyt"]},
    {"service": "wall street journal", "url": "https://account.wsj.com/", "aliases": ["wsj"]},
    {"service": "washington post", "url": "https://www.washingtonpost.com/subscriptions/", "aliases": ["wapo"]},
    {"service": "masterclass", "url": "https://www.masterclass.com/account", "aliases": []},
    {"service": "skillshare", "url": "https://www.skillshare.com/account", "aliases": ["skillshare premium"]},
    {"service": "coursera", "url": "https://www.coursera.org/account", "aliases": ["coursera plus"]},
    {"service": "duolingo", "url": "https://www.duolingo.com/settings/subscription", "aliases": ["duolingo plus", "super duolingo"]},
]


class CancellationLinkResolver:
    """Maps a free-text service name to a direct cancellation URL."""

    def __init__(self, links: list[dict] | None = None):
        self.links = links if links is not None else KNOWN_SERVICES

    def resolve(self, service_name: str | None) -> Optional[str]:
        if not service_name:
            return None

        normalized = service_name.strip().lower()
        if not normalized:
            return None

        for link in self.links:
            names = [link["service"], *link.get("aliases", [])]
            if any(name.lower() == normalized for name in names):
                return link["url"]

        for link in self.links:
            names = [link["service"], *link.get("aliases", [])]
            for name in names:
                name = name.lower()
                if name in normalized or normalized in name:
                    return link["url"]

        return None

    def redirect_url(self, service_name: str, base_url: str) -> str:
        """Link used in emails; routes through our own /redirect endpoint."""
        return f"{base_url.rstrip('/')}/redirect?{urlencode({'service': service_name})}"

    def search_urls(self, service_name: str) -> dict[str, str]:
        query = quote(f"cancel {service_name} subscription")
        return {
            "google": f"https://www.google.com/search?q={query}",
            "duckduckgo": f"https://duckduckgo.com/?q={query}",
        }


default_resolver = CancellationLinkResolver()
