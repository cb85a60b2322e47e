"""liftlog - workout tracking core: exercises, templates, routines and workouts."""
