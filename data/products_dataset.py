CATEGORIES = [
    {"name": "vegetables", "label": "Vegetables"},
    {"name": "fruits", "label": "Fruits"},
    {"name": "grains", "label": "Grains & Cereals"},
    {"name": "meat", "label": "Meat & Poultry"},
    {"name": "fish", "label": "Fish & Seafood"},
    {"name": "dairy", "label": "Dairy & Eggs"},
    {"name": "legumes", "label": "Legumes"},
    {"name": "nuts", "label": "Nuts & Seeds"},
    {"name": "drinks", "label": "Drinks"},
    {"name": "snacks", "label": "Snacks & Sweets"},
]

# Nutrition per 100 g
PRODUCTS_DATA = [
    {"name": "Broccoli", "category": "vegetables", "calories": 34, "protein": 2.8, "fat": 0.4, "carbs": 6.6},
    {"name": "Spinach", "category": "vegetables", "calories": 23, "protein": 2.9, "fat": 0.4, "carbs": 3.6},
    {"name": "Carrot", "category": "vegetables", "calories": 41, "protein": 0.9, "fat": 0.2, "carbs": 9.6},
    {"name": "Tomato", "category": "vegetables", "calories": 18, "protein": 0.9, "fat": 0.2, "carbs": 3.9},
    {"name": "Apple", "category": "fruits", "calories": 52, "protein": 0.3, "fat": 0.2, "carbs": 14},
    {"name": "Banana", "category": "fruits", "calories": 89, "protein": 1.1, "fat": 0.3, "carbs": 23},
    {"name": "Blueberries", "category": "fruits", "calories": 57, "protein": 0.7, "fat": 0.3, "carbs": 14.5},
    {"name": "Rolled oats", "category": "grains", "calories": 379, "protein": 13.2, "fat": 6.5, "carbs": 67.7},
    {"name": "Brown rice (cooked)", "category": "grains", "calories": 112, "protein": 2.3, "fat": 0.8, "carbs": 23.5},
    {"name": "Quinoa (cooked)", "category": "grains", "calories": 120, "protein": 4.4, "fat": 1.9, "carbs": 21.3},
    {"name": "Whole grain bread", "category": "grains", "calories": 247, "protein": 13, "fat": 3.4, "carbs": 41},
    {"name": "Chicken breast", "category": "meat", "calories": 165, "protein": 31, "fat": 3.6, "carbs": 0},
    {"name": "Lean beef", "category": "meat", "calories": 250, "protein": 26, "fat": 15, "carbs": 0},
    {"name": "Salmon", "category": "fish", "calories": 208, "protein": 20, "fat": 13, "carbs": 0},
    {"name": "Tuna (canned in water)", "category": "fish", "calories": 116, "protein": 26, "fat": 1, "carbs": 0},
    {"name": "Egg", "category": "dairy", "calories": 155, "protein": 13, "fat": 11, "carbs": 1.1},
    {"name": "Greek yogurt", "category": "dairy", "calories": 59, "protein": 10, "fat": 0.4, "carbs": 3.6},
    {"name": "Milk 2%", "category": "dairy", "calories": 50, "protein": 3.4, "fat": 2, "carbs": 4.8},
    {"name": "Lentils (cooked)", "category": "legumes", "calories": 116, "protein": 9, "fat": 0.4, "carbs": 20},
    {"name": "Chickpeas (cooked)", "category": "legumes", "calories": 164, "protein": 8.9, "fat": 2.6, "carbs": 27.4},
    {"name": "Tofu", "category": "legumes", "calories": 76, "protein": 8, "fat": 4.8, "carbs": 1.9},
    {"name": "Walnuts", "category": "nuts", "calories": 654, "protein": 15, "fat": 65, "carbs": 14},
    {"name": "Chia seeds", "category": "nuts", "calories": 486, "protein": 17, "fat": 31, "carbs": 42},
    {"name": "Olive oil", "category": None, "calories": 884, "protein": 0, "fat": 100, "carbs": 0},
    {"name": "Orange juice", "category": "drinks", "calories": 45, "protein": 0.7, "fat": 0.2, "carbs": 10.4},
    {"name": "Cola soda", "category": "drinks", "calories": 42, "protein": 0, "fat": 0, "carbs": 10.6},
    {"name": "Potato chips", "category": "snacks", "calories": 536, "protein": 7, "fat": 35, "carbs": 53},
]
