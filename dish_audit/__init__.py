"""
Dish audit service:
- vision: cascading Gemini -> Groq photo classification
- nutrition_db: RecipeDB / FlavorDB lookups through the data proxy
- ingredients: normalization of loosely shaped ingredient fields
- merger: priority rules combining classifier and database data
- handler: per-request orchestration behind POST /api/audit-dish
"""
