ACHIEVEMENTS_DATA = [
    # Getting started
    {"name": "First Bite", "category": "getting_started", "icon_class": "fa-utensils", "points": 10,
     "criteria_type": "first_meal_log", "criteria_value_num": None,
     "description": "Log your first meal.", "criteria_description": "Log any meal in the diary"},
    {"name": "All About Me", "category": "getting_started", "icon_class": "fa-id-card", "points": 15,
     "criteria_type": "profile_complete", "criteria_value_num": None,
     "description": "Fill in every profile field.", "criteria_description": "Weight, height, age, gender, activity level and goal set"},
    {"name": "Fresh Start", "category": "getting_started", "icon_class": "fa-user-pen", "points": 5,
     "criteria_type": "profile_updated", "criteria_value_num": None,
     "description": "Update your profile.", "criteria_description": "Save any profile change"},
    {"name": "On the Scale", "category": "getting_started", "icon_class": "fa-weight-scale", "points": 10,
     "criteria_type": "first_weight_log", "criteria_value_num": None,
     "description": "Log your weight for the first time.", "criteria_description": "Record a weight entry"},
    # Recipes
    {"name": "Home Chef", "category": "recipes", "icon_class": "fa-book-open", "points": 15,
     "criteria_type": "recipes_created_count", "criteria_value_num": 1,
     "description": "Create your first recipe.", "criteria_description": "Create 1 recipe"},
    {"name": "Recipe Collector", "category": "recipes", "icon_class": "fa-book", "points": 30,
     "criteria_type": "recipes_created_count", "criteria_value_num": 5,
     "description": "Create five recipes.", "criteria_description": "Create 5 recipes"},
    {"name": "Eat What You Cook", "category": "recipes", "icon_class": "fa-kitchen-set", "points": 20,
     "criteria_type": "own_recipes_used", "criteria_value_num": 3,
     "description": "Log your own recipes three times.", "criteria_description": "Use own recipes in 3 diary entries"},
    # Consistency
    {"name": "Three-Day Streak", "category": "consistency", "icon_class": "fa-fire", "points": 20,
     "criteria_type": "consecutive_days_tracked", "criteria_value_num": 3,
     "description": "Track food three days in a row.", "criteria_description": "3 consecutive days with food logged"},
    {"name": "Full Week", "category": "consistency", "icon_class": "fa-calendar-check", "points": 40,
     "criteria_type": "consecutive_days_tracked", "criteria_value_num": 7,
     "description": "Track food seven days in a row.", "criteria_description": "7 consecutive days with food logged"},
    {"name": "Weigh-in Habit", "category": "consistency", "icon_class": "fa-chart-line", "points": 25,
     "criteria_type": "consecutive_weight_logs", "criteria_value_num": 5,
     "description": "Log your weight five days in a row.", "criteria_description": "5 consecutive days with a weight entry"},
    {"name": "Regular Schedule", "category": "consistency", "icon_class": "fa-clock", "points": 20,
     "criteria_type": "consistent_meal_times", "criteria_value_num": 5,
     "description": "Keep a regular eating schedule.", "criteria_description": "Meals logged on 5 of the last 7 days"},
    {"name": "Complete Week", "category": "consistency", "icon_class": "fa-calendar-week", "points": 50,
     "criteria_type": "complete_meal_week", "criteria_value_num": 7,
     "description": "Log all four meals every day for a week.", "criteria_description": "7 days with breakfast, lunch, dinner and snack"},
    # Nutrition
    {"name": "Protein Power", "category": "nutrition", "icon_class": "fa-drumstick-bite", "points": 15,
     "criteria_type": "protein_target_met_times", "criteria_value_num": 1,
     "description": "Hit your protein target.", "criteria_description": "Eat at least 1.6 g protein per kg in a day"},
    {"name": "Bullseye", "category": "nutrition", "icon_class": "fa-bullseye", "points": 20,
     "criteria_type": "calorie_target_met", "criteria_value_num": None,
     "description": "Land within 100 kcal of your target.", "criteria_description": "Daily calories within +/-100 kcal of target"},
    {"name": "Macro Master", "category": "nutrition", "icon_class": "fa-scale-balanced", "points": 30,
     "criteria_type": "all_macros_met", "criteria_value_num": None,
     "description": "Meet all macro targets in a day.", "criteria_description": "Protein, fat and carbs each at 90% of target"},
    {"name": "Rainbow Plate", "category": "nutrition", "icon_class": "fa-palette", "points": 15,
     "criteria_type": "food_variety_day", "criteria_value_num": 5,
     "description": "Eat from five food categories in one day.", "criteria_description": "5 product categories in a day"},
    {"name": "Four Square", "category": "nutrition", "icon_class": "fa-table-cells-large", "points": 10,
     "criteria_type": "meal_types_day", "criteria_value_num": 4,
     "description": "Log breakfast, lunch, dinner and a snack on the same day.", "criteria_description": "4 meal types in a day"},
    # Activity
    {"name": "Calorie Crusher", "category": "activity", "icon_class": "fa-person-running", "points": 20,
     "criteria_type": "calories_burned_day", "criteria_value_num": 500,
     "description": "Burn 500 kcal through exercise in a day.", "criteria_description": "500 kcal burned in one day"},
    {"name": "Endurance", "category": "activity", "icon_class": "fa-stopwatch", "points": 20,
     "criteria_type": "long_workout", "criteria_value_num": 60,
     "description": "Complete a workout of an hour or more.", "criteria_description": "Single activity of 60+ minutes"},
    {"name": "Active Week", "category": "activity", "icon_class": "fa-dumbbell", "points": 30,
     "criteria_type": "weekly_calories_burned", "criteria_value_num": 2000,
     "description": "Burn 2000 kcal through exercise in a week.", "criteria_description": "2000 kcal burned over the last 7 days"},
    {"name": "Keep Moving", "category": "activity", "icon_class": "fa-shoe-prints", "points": 25,
     "criteria_type": "consecutive_activity_days", "criteria_value_num": 3,
     "description": "Log activity three days in a row.", "criteria_description": "3 consecutive days with activity logged"},
]
