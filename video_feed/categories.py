"""Curated feed categories and the subreddits behind each of them."""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Viral"

CATEGORY_MAP: Dict[str, List[str]] = {
    "Hot": [
        "RealGirls", "holdmycosmo", "BikiniBodies", "TightDress", "YogaPants",
        "FitGirls", "BeautifulFemales", "HighHeels", "Stockings", "Legs",
        "CelebrityNSFW", "NSFW_GIFS", "WildStar", "Amateur", "Selfie",
        "gonewild", "AsiansGoneWild", "palegirls", "CollegeAmateurs",
        "FestivalSluts", "WorkGoneWild", "PetiteGoneWild", "TallGoneWild",
        "Curvy", "Thick", "Slim", "Fit", "Athletic", "GirlsInTightPants",
        "HighResNSFW", "GfycatDepot", "NSFW_HTML5", "60fpsporn", "HighQualityNSFW",
    ],
    "Viral": [
        "TikTokCringe", "Unexpected", "nextfuckinglevel", "BeAmazed", "MayBeMaybeMaybe",
        "funny", "WatchPeopleDieInside", "HoldMyBeer", "Instant_Regret", "NatureIsFuckingLit",
        "AnimalsBeingDerps", "Satisfying", "interestingasfuck", "Damnthatsinteresting",
        "OddlySatisfying", "WorldMusic", "Art", "Space", "Science", "Memes",
        "DankMemes", "WholesomeMemes", "Technology", "Gadgets", "Gaming",
        "Games", "PCMasterRace", "NintendoSwitch", "PS5", "XboxSeriesX",
        "MildlyInteresting", "HumansBeingBros", "MadeMeSmile", "Nonononoyes",
        "Aww", "EyeBleach", "AnimalsBeingBros", "JusticeServed", "PublicFreakout",
    ],
}


class CategoryRegistry:
    """
    Static lookup from category name to its ordered list of subreddits.

    Unknown names resolve to the default category instead of failing.
    """

    def __init__(
        self,
        categories: Optional[Mapping[str, Iterable[str]]] = None,
        default: str = DEFAULT_CATEGORY,
    ):
        """
        Initialize the registry.

        Args:
            categories: Mapping of category name to subreddit names (defaults to CATEGORY_MAP)
            default: Category used for unrecognized names

        Raises:
            ValueError: If a category has no subreddits or the default is not configured
        """
        source = CATEGORY_MAP if categories is None else categories
        self._categories: Dict[str, List[str]] = {
            name: list(subreddits) for name, subreddits in source.items()
        }

        for name, subreddits in self._categories.items():
            if not subreddits:
                raise ValueError(f"Category '{name}' has no subreddits configured")
        if default not in self._categories:
            raise ValueError(f"Default category '{default}' is not configured")

        self.default = default

    def sources_for(self, category: str) -> List[str]:
        """
        Return the subreddits configured for a category.

        Args:
            category: Category name

        Returns:
            A copy of the category's subreddit list, or the default category's list
            if the name is not recognized
        """
        if category not in self._categories:
            logger.debug(f"Unknown category '{category}', falling back to '{self.default}'")
            category = self.default
        return list(self._categories[category])

    def names(self) -> List[str]:
        return list(self._categories)

    def __contains__(self, category: object) -> bool:
        return category in self._categories


_default_registry = CategoryRegistry()


def sources_for(category: str) -> List[str]:
    """Look up a category in the built-in category map."""
    return _default_registry.sources_for(category)
