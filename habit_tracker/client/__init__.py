from habit_tracker.client.habit_client import HabitClient, HabitClientError

__all__ = ["HabitClient", "HabitClientError"]
