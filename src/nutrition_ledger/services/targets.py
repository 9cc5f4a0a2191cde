"""Daily target calculation from body metrics.

Uses:
- Mifflin-St Jeor equation for Basal Metabolic Rate (BMR)
- Activity multipliers for Total Daily Energy Expenditure (TDEE)
- Body-weight based protein and fat, carbs fill the remaining calories
"""

import math

from nutrition_ledger.domain.models import ActivityLevel, Profile, Sex, Targets

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

CALORIES_PER_GRAM = {
    "protein": 4,
    "carbs": 4,
    "fat": 9,
}

PROTEIN_G_PER_KG = 2.0
FAT_G_PER_KG = 0.9
WATER_ML_PER_KG = 35
FIBER_G_PER_1000_KCAL = 14
SODIUM_MG = 2300
POTASSIUM_MG = 3500


def calculate_bmr(profile: Profile) -> float:
    """Calculate Basal Metabolic Rate using the Mifflin-St Jeor equation.

    Male:   BMR = 10 × weight(kg) + 6.25 × height(cm) − 5 × age(y) + 5
    Female: BMR = 10 × weight(kg) + 6.25 × height(cm) − 5 × age(y) − 161
    """
    bmr = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    if profile.sex == Sex.MALE:
        bmr += 5
    else:
        bmr -= 161
    return bmr


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> int:
    """Calculate Total Daily Energy Expenditure, rounded to whole kcal."""
    return round_half_up(bmr * ACTIVITY_MULTIPLIERS[activity_level])


def compute_targets(profile: Profile) -> Targets:
    """Calculate daily targets for a profile.

    Steps:
    1. BMR via Mifflin-St Jeor, scaled by activity to TDEE
    2. Protein 2.0 g/kg and fat 0.9 g/kg of body weight
    3. Carbs take whatever calories remain, never below zero
    4. Water 35 ml/kg, fiber 14 g per 1000 kcal, fixed sodium and potassium
    """
    tdee = calculate_tdee(calculate_bmr(profile), profile.activity_level)

    protein_g = round_half_up(profile.weight_kg * PROTEIN_G_PER_KG)
    fat_g = round_half_up(profile.weight_kg * FAT_G_PER_KG)

    consumed = (
        protein_g * CALORIES_PER_GRAM["protein"] + fat_g * CALORIES_PER_GRAM["fat"]
    )
    remaining = max(0, tdee - consumed)
    carbs_g = round_half_up(remaining / CALORIES_PER_GRAM["carbs"])

    return Targets(
        calories=tdee,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        water_ml=round_half_up(profile.weight_kg * WATER_ML_PER_KG),
        fiber_g=round_half_up(tdee / 1000 * FIBER_G_PER_1000_KCAL),
        sodium_mg=SODIUM_MG,
        potassium_mg=POTASSIUM_MG,
    )


def resolve_targets(profile: Profile, targets: Targets) -> Targets:
    """Return calculated targets unless the profile overrides them manually."""
    if profile.manual_targets:
        return targets
    return compute_targets(profile)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)

