"""Per-type smart list templates and the keyword tables used to classify items."""

from dataclasses import dataclass

from app.db.models import ListType

SHOPPING_CATEGORIES: tuple[str, ...] = (
    "Produce",
    "Dairy",
    "Meat",
    "Bakery",
    "Frozen",
    "Beverages",
    "Household",
    "Snacks",
    "Pantry",
    "Other",
)


@dataclass(frozen=True)
class ListTemplate:
    """Name, taxonomy and catch-all category for a new list of a given type."""

    type: str
    name: str
    categories: tuple[str, ...]
    default_category: str


LIST_TEMPLATES: dict[str, ListTemplate] = {
    t.type: t
    for t in (
        ListTemplate(ListType.SHOPPING.value, "Shopping List", SHOPPING_CATEGORIES, "Other"),
        ListTemplate(
            ListType.PUNCH_LIST.value,
            "Punch List",
            ("Plumbing", "Electrical", "Painting", "Flooring", "HVAC", "Roofing", "General"),
            "General",
        ),
        ListTemplate(
            ListType.WAITING_LIST.value,
            "Waiting List",
            ("Restaurant", "Appointment", "Service", "Event"),
            "Service",
        ),
        ListTemplate(ListType.TODO.value, "To-Do List", ("Work", "Personal", "Urgent", "Later"), "Personal"),
        ListTemplate(
            ListType.CLOSING_LIST.value,
            "Closing List",
            ("Inspection", "Financing", "Legal", "Insurance", "Documentation", "Final Walkthrough"),
            "Documentation",
        ),
        ListTemplate(
            ListType.PATIENT_LIST.value,
            "Patient Care List",
            ("Appointments", "Follow-ups", "Prescriptions", "Tests", "Consultations"),
            "Follow-ups",
        ),
        ListTemplate(
            ListType.CASE_LIST.value,
            "Case Management",
            ("Research", "Documentation", "Court Dates", "Client Meetings", "Filing"),
            "Research",
        ),
        ListTemplate(
            ListType.LESSON_LIST.value,
            "Teaching Tasks",
            ("Lesson Plans", "Grading", "Parent Meetings", "Supplies", "Field Trips"),
            "Lesson Plans",
        ),
        ListTemplate(
            ListType.MENU_LIST.value,
            "Kitchen/Menu Tasks",
            ("Ingredients", "Equipment", "Staff", "Menu Items", "Supplies", "Vendors"),
            "Ingredients",
        ),
    )
}


def get_list_template(list_type: str | None) -> ListTemplate:
    """Template for a list type; unknown types get the shopping template."""
    return LIST_TEMPLATES.get(list_type or "", LIST_TEMPLATES[ListType.SHOPPING.value])


# -----------------------------------------------------------------------------
# Item -> category keyword tables (first match wins, dict order matters)
# -----------------------------------------------------------------------------

SHOPPING_KEYWORD_CATEGORIES: dict[str, tuple[str, ...]] = {
    "Produce": (
        "apple", "banana", "orange", "lettuce", "tomato", "potato", "onion", "carrot",
        "spinach", "broccoli", "cucumber", "bell pepper", "mushroom", "avocado",
        "strawberr", "grape", "lemon", "lime", "garlic", "ginger",
    ),
    "Dairy": ("milk", "cheese", "yogurt", "butter", "cream", "egg", "sour cream", "cottage cheese"),
    "Meat": ("chicken", "beef", "pork", "turkey", "fish", "salmon", "ground beef", "bacon", "sausage", "pastrami"),
    "Frozen": ("frozen", "ice cream", "popsicle"),
    "Beverages": ("coffee", "tea", "juice", "soda", "water", "beer", "wine", "cola"),
    "Bakery": ("bread", "bagel", "muffin", "croissant", "cake", "pastry", "pastries"),
    "Household": ("detergent", "soap", "paper towel", "toilet paper", "trash bag", "sponge", "bleach"),
    "Pantry": ("pasta", "rice", "flour", "sugar", "oil", "salt", "pepper", "sauce", "cereal", "beans", "canned"),
    "Snacks": ("chocolate", "twizzlers", "chips", "crackers", "nuts", "almond", "candy", "cookies", "popcorn"),
}

PUNCH_KEYWORD_CATEGORIES: dict[str, tuple[str, ...]] = {
    "Plumbing": ("plumb", "pipe", "drain", "faucet", "toilet", "shower", "sink"),
    "Electrical": ("electric", "wire", "outlet", "switch", "light", "circuit"),
    "Painting": ("paint", "brush", "roller", "primer", "wall"),
    "General": ("fix", "repair", "install", "replace"),
}

WAITING_KEYWORD_CATEGORIES: dict[str, tuple[str, ...]] = {
    "Restaurant": ("restaurant", "table", "dinner", "lunch", "brunch", "reservation"),
    "Appointment": ("appointment", "doctor", "dentist", "clinic"),
    "Event": ("concert", "show", "event", "ticket", "game"),
}

TODO_KEYWORD_CATEGORIES: dict[str, tuple[str, ...]] = {
    "Urgent": ("urgent", "asap", "today", "immediately"),
    "Work": ("report", "meeting", "email", "project", "client", "deadline", "presentation"),
    "Later": ("someday", "later", "eventually"),
}

KEYWORD_TABLES: dict[str, dict[str, tuple[str, ...]]] = {
    ListType.SHOPPING.value: SHOPPING_KEYWORD_CATEGORIES,
    ListType.PUNCH_LIST.value: PUNCH_KEYWORD_CATEGORIES,
    ListType.WAITING_LIST.value: WAITING_KEYWORD_CATEGORIES,
    ListType.TODO.value: TODO_KEYWORD_CATEGORIES,
}


# -----------------------------------------------------------------------------
# Item -> list type inference keywords
# -----------------------------------------------------------------------------

SHOPPING_ITEM_KEYWORDS: tuple[str, ...] = (
    "milk", "bread", "cheese", "meat", "fruit", "vegetable", "grocery", "food", "snack", "drink",
    "pastrami", "deli", "produce", "chocolate", "candy", "sugar", "flour", "eggs", "butter",
    "coffee", "tea", "juice", "soda", "water", "beer", "wine", "alcohol", "cereal", "pasta",
    "rice", "beans", "nuts", "oil", "spice", "sauce", "condiment", "frozen", "canned", "fresh",
    "organic", "buy", "purchase", "get", "need", "want", "shop", "store",
)
PUNCH_ITEM_KEYWORDS: tuple[str, ...] = (
    "fix", "repair", "install", "paint", "replace", "maintenance", "contractor", "plumber", "electrician",
)
WAITING_ITEM_KEYWORDS: tuple[str, ...] = ("wait", "queue", "table", "restaurant")
APPOINTMENT_ITEM_KEYWORDS: tuple[str, ...] = (
    "appointment", "meeting", "call", "visit", "consultation", "dentist", "doctor", "interview",
)
PURCHASE_VERBS: tuple[str, ...] = ("buy", "get", "purchase")

# Display-name hints used to prefer a well-named list among several of one type
LIST_NAME_HINTS: dict[str, tuple[str, ...]] = {
    ListType.SHOPPING.value: ("shop", "grocery", "food"),
}
