from enum import Enum

class PropertyStatus(str, Enum):
    available = "available"
    pending = "pending"
    leased = "leased"

class PropertyType(str, Enum):
    apartment = "Apartment"
    house = "House"
    studio = "Studio"
    townhome = "Townhome"

class SleepSchedule(str, Enum):
    early_bird = "Early Bird"
    night_owl = "Night Owl"
    flexible = "Flexible"

class Cleanliness(str, Enum):
    very_clean = "Very Clean"
    moderately_clean = "Moderately Clean"
    relaxed = "Relaxed"

class NoiseLevel(str, Enum):
    quiet = "Quiet"
    moderate = "Moderate"
    lively = "Lively"

class GuestFrequency(str, Enum):
    rarely = "Rarely"
    sometimes = "Sometimes"
    often = "Often"

class Smoking(str, Enum):
    no = "No"
    yes = "Yes"

class Drinking(str, Enum):
    no = "No"
    yes = "Yes"
    sometimes = "Sometimes"

class PetPreference(str, Enum):
    no_pets = "No Pets"
    has_pets = "Has Pets"
    open_to_pets = "Open to Pets"

class StudyHabits(str, Enum):
    focused = "Focused"
    balanced = "Balanced"
    flexible = "Flexible"

class SocialLevel(str, Enum):
    low_key = "Low-key"
    social = "Social"
    very_social = "Very Social"
