from habit_tracker.domains.habits.models.habit_models import Habit, HabitEntry

__all__ = ["Habit", "HabitEntry"]
