"""Engine foundation shared by every game system."""
