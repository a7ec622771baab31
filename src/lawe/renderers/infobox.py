"""Affiliation card for the ``<affili name=... school=.../>`` directive.

The card is built from fixed roster tables: the student's club is the first
roster that lists the name, and the school code selects the heading and
logo. A name that appears in no roster is an error, since the card has
nothing to show.
"""

from __future__ import annotations

from lawe.config import LaweConfig, get_config
from lawe.errors import RenderError
from lawe.sanitize import escape_attribute, html_escape

CLUB_MEMBERS: dict[str, tuple[str, ...]] = {
    "schale": ("sensei", "arona"),
    "schale1": ("sensei", "arona", "plana"),
    "gsc": ("president", "rin", "momoka", "ayumu", "kaya", "aoi", "sumomo", "haine"),
    "ftf": ("shiroko", "hoshino", "nonomi", "serika", "ayane"),
    "prefect": ("hina", "ako", "iori", "chinatsu"),
    "gematria": ("black_suit", "beatrice", "maestro"),
    "pandemonium": ("makoto", "satsuki", "iroha", "chiaki", "ibuki"),
    "68": ("aru", "kayoko", "mutsuki", "haruka"),
    "seminar": ("yuuka", "noa", "rio", "koyuki"),
    "gdd": ("yuzu", "momoi", "midori", "aris"),
    "c&c": (),
    "tea": ("nagisa", "mika", "seia"),
    "makeup": ("hifumi", "azusa", "hanako", "koharu"),
    "sisterhood": ("sakurako", "mari", "hinata"),
    "justice": ("tsurugi", "hasumi", "mashiro", "ichika"),
    "rabbit": ("miyako", "saki", "moe", "miyu"),
    "fox": ("yukino", "niko", "kurumi", "otogi"),
    "ccc": ("hikari&nozomi", "hikari&nozomi"),
    "hso": ("suou",),
}

PERSON_FULL_NAMES: dict[str, str] = {
    "shiroko": "Sunaookami Shiroko",
    "serika": "Kuromi Serika",
    "hoshino": "Takanashi Hoshino",
    "nonomi": "Izayoi Nonomi",
    "ayane": "Okusora Ayane",
    "arona": "Arona",
    "hina": "Sorasaki Hina",
    "ako": "Amau Ako",
    "iori": "Shiromi Iori",
    "chinatsu": "Hinomiya Chinatsu",
    "aru": "Rikuhachima Aru",
    "kayoko": "Onikata Kayoko",
    "mutsuki": "Asagi Mutsuki",
    "haruka": "Igusa Haruka",
    "hifumi": "Ajitani Hifumi",
    "yuuka": "Hayase Yuuka",
    "izuna": "Kuda Izuna",
    "azusa": "Shirasu Azusa",
    "momoi": "Saiba Momoi",
    "midori": "Saiba Midori",
    "aris": "Tendou Aris",
    "mari": "Iochi Mari",
    "makoto": "Hanuma Makoto",
    "kirara": "Yozakura Kirara",
    "izumi": "Shishidou Izumi",
    "rio": "Tsukatsuki Rio",
    "noa": "Ushio Noa",
    "koyuki": "Kurosaki Koyuki",
    "seia": "Yurizono Seia",
}

SCHOOL_NAMES: dict[str, str] = {
    "abydos": "Abydos High School",
    "gehenna": "Gehenna Academy",
    "trinity": "Trinity General School",
    "arius": "Arius Branch School",
    "millennium": "Millennium Science School",
    "hyakkiyako": "Allied Hyakkiyako Academy",
    "shanhaijing": "Shanhaijing Senior Secondary School",
    "valkyrie": "Valkyrie Police School",
    "red_winter": "Red Winter Federal Academy",
    "srt": "SRT Special Academy",
    "highlander": "Highlander Railroad Academy",
    "gematria": "Gematria",
}

CLUB_NAMES: dict[str, str] = {
    "schale": "S.C.H.A.L.E",
    "schale1": "S.C.H.A.L.E",
    "gsc": "General Student Council",
    "ftf": "Foreclosure Task Force",
    "seminar": "Seminar",
}


def find_club(name: str) -> str | None:
    """Return the first club whose roster lists ``name``.

    Example:
        >>> find_club("hoshino")
        'ftf'
        >>> find_club("nobody") is None
        True
    """
    for club, members in CLUB_MEMBERS.items():
        if name in members:
            return club
    return None


def render_affili_table(name: str, school: str, config: LaweConfig | None = None) -> str:
    """Render the affiliation card for ``name`` at ``school``.

    Raises:
        RenderError: If ``name`` belongs to no known club
    """
    config = config or get_config()
    club = find_club(name)
    if club is None:
        raise RenderError(f"No club roster lists student {name!r}")

    school_attr = escape_attribute(school)
    school_name = html_escape(SCHOOL_NAMES.get(school, ""))
    setting_base = config.setting_base.rstrip("/")
    logo = f"{config.image_base_url.rstrip('/')}/icons/{school_attr}.png"

    members = "".join(
        f'<li class="border-b p-2"><a>{html_escape(PERSON_FULL_NAMES.get(member, member))}</a></li>'
        for member in CLUB_MEMBERS[club]
    )

    return (
        '<table id="lawe-infoTable" class="affili">'
        '<thead class="thead-no-style"><tr>'
        '<th id="lawe-infoTable-th" class="pretitle" colspan="2">A member of<br />'
        f'<h3 class="h3-no-spacing"><a href="{setting_base}/{school_attr}">{school_name}</a></h3>'
        "</th></tr></thead>"
        "<tbody><tr>"
        '<td id="lawe-infoTable-school-cell" class="no-spacing" colspan="2">'
        '<figure id="lawe-figure" class="figure-no-style">'
        f'<a id="lawe-figure-a" class="a-no-style" href="{setting_base}/academies/{school_attr}">'
        f'<img src="{logo}" width="100" alt="The logo of {school_name}." loading="lazy" />'
        "</a></figure></td></tr>"
        '<tr><td class="center" colspan="2"><div id="clubMemberList">'
        f"<h3>{html_escape(CLUB_NAMES.get(club, club))}</h3>"
        '<div class="max-w-xs flex flex-col border-r border-t border-l border-gray-500 rounded-md">'
        f"<ul>{members}</ul>"
        "</div></div></td></tr></tbody></table>"
    )


__all__ = [
    "CLUB_MEMBERS",
    "CLUB_NAMES",
    "PERSON_FULL_NAMES",
    "SCHOOL_NAMES",
    "find_club",
    "render_affili_table",
]
