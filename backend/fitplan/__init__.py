"""FitPlan API: AI-generated workout plans and live workout sessions."""
