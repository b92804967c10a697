EXERCISES_DATA = [
    {"name": "Walking (brisk)", "description": "Walking at about 5.5 km/h", "met_value": 4.3, "calories_per_minute": None},
    {"name": "Running (10 km/h)", "description": "Steady running pace", "met_value": 9.8, "calories_per_minute": None},
    {"name": "Cycling (moderate)", "description": "Leisure cycling, 16-19 km/h", "met_value": 6.8, "calories_per_minute": None},
    {"name": "Swimming (freestyle)", "description": "Moderate effort laps", "met_value": 8.3, "calories_per_minute": None},
    {"name": "Strength training", "description": "General weight lifting", "met_value": 5.0, "calories_per_minute": None},
    {"name": "Yoga", "description": "Hatha yoga", "met_value": 2.5, "calories_per_minute": None},
    {"name": "Jump rope", "description": "Fixed-rate estimate", "met_value": None, "calories_per_minute": 12.0},
    {"name": "Stair climbing", "description": "Fixed-rate estimate", "met_value": None, "calories_per_minute": 9.0},
]
