"""Core business logic layer.

Subpackages:
- pantry: depletion, frequency ranking, manual stock changes, stock-up view
- suggestions: pantry coverage, weekday recommender, surprise picker
- meals: meal-log pipeline
- recipes: catalog services and web import
- shopping: building shopping list rows
"""
__all__ = ["pantry", "suggestions", "meals", "recipes", "shopping"]
