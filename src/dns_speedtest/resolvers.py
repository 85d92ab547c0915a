"""
Built-in catalog of public DNS resolvers.

A reference list of well-known resolvers (name, address, website) and
the default domain set used when none are given.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class KnownResolver:
    """A well-known public resolver."""
    name: str
    ip: str
    website: str


RESOLVERS: list[KnownResolver] = [
    KnownResolver("Cloudflare", "1.1.1.1", "https://www.cloudflare.com/dns/"),
    KnownResolver("Google", "8.8.8.8", "https://developers.google.com/speed/public-dns"),
    KnownResolver("Quad9", "9.9.9.9", "https://www.quad9.net/"),
    KnownResolver("OpenDNS", "208.67.222.222", "https://www.opendns.com/"),
    KnownResolver("AdGuard DNS", "94.140.14.14", "https://adguard-dns.io/en/public-dns.html"),
    KnownResolver("Comodo Secure DNS", "8.26.56.26", "https://www.comodo.com/secure-dns/"),
    KnownResolver("CleanBrowsing", "185.228.168.9", "https://cleanbrowsing.org/"),
    KnownResolver("Yandex DNS", "77.88.8.8", "https://dns.yandex.com/"),
    KnownResolver("Cisco OpenDNS", "208.67.220.220", "https://www.opendns.com/"),
    KnownResolver(
        "Verisign",
        "64.6.64.6",
        "https://www.verisign.com/en_US/security-services/public-dns/index.xhtml",
    ),
    KnownResolver("Alternate DNS", "76.76.19.19", "https://alternatedns.com/"),
    KnownResolver("FDN", "80.67.169.12", "https://www.fdn.fr/"),
]

# Gaming and CDN heavy sites
DEFAULT_DOMAINS = [
    "google.com",
    "cloudflare.com",
    "amazon.com",
    "steampowered.com",
    "ea.com",
    "epicgames.com",
    "playstation.com",
    "xbox.com",
    "blizzard.com",
    "riotgames.com",
    "ubisoft.com",
    "nintendo.com",
    "bethesda.net",
    "rockstargames.com",
    "twitch.tv",
    "discord.com",
    "leagueoflegends.com",
    "dota2.com",
    "fortnite.com",
    "minecraft.net",
    "roblox.com",
    "activision.com",
    "valvesoftware.com",
    "origin.com",
    "gog.com",
]


def lookup_resolver(ip: str) -> Optional[KnownResolver]:
    """Find a catalog entry by address."""
    for resolver in RESOLVERS:
        if resolver.ip == ip.strip():
            return resolver
    return None


def default_resolver_ips() -> list[str]:
    """Addresses of every catalog resolver."""
    return [resolver.ip for resolver in RESOLVERS]
