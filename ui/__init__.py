"""UI-side glue for the workout session engine."""
