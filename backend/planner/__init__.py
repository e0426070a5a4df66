"""Homeschool weekly planner: scheduling, adjustment, reflow and progress tracking."""
