"""Built-in provider adapters, in catalogue order."""

from __future__ import annotations

from torrentsearch.infrastructure.providers.builtin.animetosho import AnimeTosho
from torrentsearch.infrastructure.providers.builtin.eztv import Eztv
from torrentsearch.infrastructure.providers.builtin.knaben import Knaben
from torrentsearch.infrastructure.providers.builtin.limetorrents import LimeTorrents
from torrentsearch.infrastructure.providers.builtin.mypornclub import MyPornClub
from torrentsearch.infrastructure.providers.builtin.nyaa import Nyaa
from torrentsearch.infrastructure.providers.builtin.sukebei import Sukebei
from torrentsearch.infrastructure.providers.builtin.thepiratebay import ThePirateBay
from torrentsearch.infrastructure.providers.builtin.therarbg import TheRarBg
from torrentsearch.infrastructure.providers.builtin.tokyotoshokan import TokyoToshokan
from torrentsearch.infrastructure.providers.builtin.torrentdownloads import (
    TorrentDownloads,
)
from torrentsearch.infrastructure.providers.builtin.torrentscsv import TorrentsCsv
from torrentsearch.infrastructure.providers.builtin.uindex import UIndex
from torrentsearch.infrastructure.providers.builtin.xxxclub import XXXClub
from torrentsearch.infrastructure.providers.builtin.yts import Yts
from torrentsearch.infrastructure.providers.httpx_base import HttpxProviderBase

BUILTIN_PROVIDERS: tuple[type[HttpxProviderBase], ...] = (
    AnimeTosho,
    Eztv,
    Knaben,
    LimeTorrents,
    MyPornClub,
    Nyaa,
    Sukebei,
    ThePirateBay,
    TheRarBg,
    TokyoToshokan,
    TorrentDownloads,
    TorrentsCsv,
    UIndex,
    XXXClub,
    Yts,
)

__all__ = [
    "BUILTIN_PROVIDERS",
    "AnimeTosho",
    "Eztv",
    "Knaben",
    "LimeTorrents",
    "MyPornClub",
    "Nyaa",
    "Sukebei",
    "ThePirateBay",
    "TheRarBg",
    "TokyoToshokan",
    "TorrentDownloads",
    "TorrentsCsv",
    "UIndex",
    "XXXClub",
    "Yts",
]
