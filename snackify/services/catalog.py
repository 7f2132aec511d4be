"""Snack catalog.

Read-only set of snacks the app ships with. Seeded ratings are the scores
shown before any user has rated a snack.
"""

from snackify.models import SeededRatings, Snack

SNACKS: tuple[Snack, ...] = (
    Snack(
        id="1",
        name="Takis Fuego",
        country="Mexico",
        category="chips",
        description="Rolled tortilla chips with hot chili pepper and lime.",
        image="images/takis-fuego.jpg",
        ratings=SeededRatings(taste=4.2, spiciness=4.6, uniqueness=3.8, count=128),
    ),
    Snack(
        id="2",
        name="Pocky Matcha",
        country="Japan",
        category="sweets",
        description="Biscuit sticks dipped in green tea cream.",
        image="images/pocky-matcha.jpg",
        ratings=SeededRatings(taste=4.4, spiciness=1.0, uniqueness=4.1, count=96),
    ),
    Snack(
        id="3",
        name="Shrimp Chips",
        country="South Korea",
        category="chips",
        description="Light, airy crackers made with real shrimp.",
        image="images/shrimp-chips.jpg",
        ratings=SeededRatings(taste=3.9, spiciness=1.2, uniqueness=3.5, count=54),
    ),
    Snack(
        id="4",
        name="Bhujia Sev",
        country="India",
        category="savory",
        description="Crunchy gram-flour noodles spiced with moth beans.",
        image="images/bhujia-sev.jpg",
        ratings=SeededRatings(taste=4.0, spiciness=3.4, uniqueness=3.9, count=41),
    ),
    Snack(
        id="5",
        name="Salmiakki",
        country="Finland",
        category="sweets",
        description="Salty liquorice lozenges with ammonium chloride.",
        image="images/salmiakki.jpg",
        ratings=SeededRatings(taste=2.8, spiciness=1.0, uniqueness=4.9, count=37),
    ),
    Snack(
        id="6",
        name="Chakalaka Crisps",
        country="South Africa",
        category="chips",
        description="Potato crisps flavoured like the spicy vegetable relish.",
        image="images/chakalaka-crisps.jpg",
        ratings=SeededRatings(taste=3.7, spiciness=3.9, uniqueness=3.6, count=12),
    ),
    Snack(
        id="7",
        name="Stroopwafel",
        country="Netherlands",
        category="sweets",
        description="Thin waffle cookies sandwiching caramel syrup.",
        image="images/stroopwafel.jpg",
        ratings=SeededRatings(taste=4.7, spiciness=1.0, uniqueness=3.2, count=143),
    ),
    Snack(
        id="8",
        name="Chapulines",
        country="Mexico",
        category="savory",
        description="Toasted grasshoppers with garlic, lime and chili salt.",
        image="images/chapulines.jpg",
    ),
)

_BY_ID = {snack.id: snack for snack in SNACKS}


def get_snack_by_id(snack_id: str) -> Snack | None:
    """Get a snack by id, or None if the catalog has no such snack."""
    return _BY_ID.get(snack_id)


def list_snacks(
    country: str | None = None,
    category: str | None = None,
    search: str | None = None,
) -> list[Snack]:
    """List catalog snacks, optionally filtered.

    Filters are case-insensitive; `search` matches name or description.
    """
    snacks = list(SNACKS)
    if country:
        wanted = country.strip().lower()
        snacks = [s for s in snacks if s.country.lower() == wanted]
    if category:
        wanted = category.strip().lower()
        snacks = [s for s in snacks if s.category.lower() == wanted]
    if search:
        needle = search.strip().lower()
        snacks = [
            s for s in snacks if needle in s.name.lower() or needle in s.description.lower()
        ]
    return snacks
