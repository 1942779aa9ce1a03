# backend/app/services/farmer/spray_schedule.py

"""
Built-in apple spray schedule used as smart-action candidates.
Order is the phenological order of the season and is preserved downstream.
"""

from typing import Any, Dict, List

APPLE_SPRAY_SCHEDULE: List[Dict[str, Any]] = [
    {
        "id": "dormant-oil",
        "stage": "Dormant",
        "title": "Dormant oil spray",
        "target_pest": "San Jose scale, European red mite eggs",
        "chemical": "Horticultural mineral oil",
        "dosage": "2 L / 100 L water",
    },
    {
        "id": "green-tip-scab",
        "stage": "Green tip",
        "title": "Protective fungicide at green tip",
        "target_pest": "Apple scab",
        "chemical": "Captan 50 WP",
        "dosage": "300 g / 100 L water",
    },
    {
        "id": "pink-bud-scab",
        "stage": "Pink bud",
        "title": "Scab cover at pink bud",
        "target_pest": "Apple scab, powdery mildew",
        "chemical": "Mancozeb 75 WP",
        "dosage": "300 g / 100 L water",
    },
    {
        "id": "petal-fall-mite",
        "stage": "Petal fall",
        "title": "Acaricide after petal fall",
        "target_pest": "European red mite",
        "chemical": "Hexythiazox 5.45 EC",
        "dosage": "40 ml / 100 L water",
    },
    {
        "id": "fruit-set-scab",
        "stage": "Fruit set",
        "title": "Scab cover at fruit set",
        "target_pest": "Apple scab",
        "chemical": "Dodine 65 WP",
        "dosage": "60 g / 100 L water",
    },
    {
        "id": "walnut-size-blotch",
        "stage": "Walnut size",
        "title": "Leaf blotch protection",
        "target_pest": "Alternaria leaf blotch",
        "chemical": "Propineb 70 WP",
        "dosage": "300 g / 100 L water",
    },
    {
        "id": "fruit-development-mite",
        "stage": "Fruit development",
        "title": "Mite follow-up",
        "target_pest": "Two-spotted spider mite",
        "chemical": "Fenpyroximate 5 EC",
        "dosage": "50 ml / 100 L water",
    },
    {
        "id": "pre-harvest-rot",
        "stage": "Pre-harvest",
        "title": "Pre-harvest fruit protection",
        "target_pest": "Scab and fruit rot",
        "chemical": "Captan 50 WP",
        "dosage": "250 g / 100 L water",
    },
]


def get_schedule() -> List[Dict[str, Any]]:
    return [dict(item) for item in APPLE_SPRAY_SCHEDULE]
