"""Placeholder catalog data until a real data store is wired in."""

from dataclasses import dataclass, field

from nutriempower.domain.catalog import NutritionSummary, Recipe, Specialist

_RECIPES = (
    Recipe(
        id=1,
        name="Quinoa Buddha Bowl",
        category="vegetarian",
        prep_time=20,
        budget="moderate",
        calories=450,
        image="/images/recipes/quinoa-bowl.jpg",
    ),
    Recipe(
        id=2,
        name="Chicken Stir Fry",
        category="protein",
        prep_time=15,
        budget="budget",
        calories=380,
        image="/images/recipes/chicken-stir-fry.jpg",
    ),
)

_SPECIALISTS = (
    Specialist(
        id=1,
        name="Dr. Sarah Johnson",
        specialty="Weight Management",
        experience="10+ years",
        rating=4.9,
        image="/images/specialists/sarah-johnson.jpg",
    ),
    Specialist(
        id=2,
        name="Dr. Michael Chen",
        specialty="Sports Nutrition",
        experience="8+ years",
        rating=4.8,
        image="/images/specialists/michael-chen.jpg",
    ),
)

_NUTRITION = NutritionSummary(
    calories=2000,
    protein=150,
    carbs=250,
    fat=80,
    fiber=30,
    message="This is mock data. Implement database integration for real data.",
)


@dataclass
class CatalogService:
    """Serves static recipes, specialists and nutrition targets."""

    recipes: tuple[Recipe, ...] = _RECIPES
    specialists: tuple[Specialist, ...] = _SPECIALISTS
    nutrition: NutritionSummary = field(default_factory=lambda: _NUTRITION)

    def list_recipes(
        self,
        category: str | None = None,
        budget: str | None = None,
        max_prep_minutes: int | None = None,
    ) -> list[Recipe]:
        """Return recipes matching every filter that was given."""
        results = list(self.recipes)
        if category:
            results = [r for r in results if r.category.lower() == category.lower()]
        if budget:
            results = [r for r in results if r.budget.lower() == budget.lower()]
        if max_prep_minutes is not None:
            results = [r for r in results if r.prep_time <= max_prep_minutes]
        return results

    def list_specialists(self) -> list[Specialist]:
        return list(self.specialists)

    def nutrition_summary(self) -> NutritionSummary:
        return self.nutrition
