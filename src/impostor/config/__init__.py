"""Engine settings and built-in word presets."""
