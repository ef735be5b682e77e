# Overview: Keyword-driven replies for the menu assistant chat.

"""
Menu Assistant

A rules table, checked top to bottom; the first rule whose keywords
appear in the lower-cased message answers. Ordering intents are checked
first and have their own dish-specific replies.
"""

ORDER_INTENT_WORDS = ("order", "get", "want")

ORDER_REPLIES = (
    (("dosa", "masala dosa"), "I can add Masala Dosa to your cart. Would you like me to do that for you?"),
    (("idli", "idly"), "I'd be happy to add Idli Sambar to your cart. Should I proceed?"),
    (("coffee",), "Our Filter Coffee is very popular. I can add it to your cart if you'd like?"),
)

ORDER_FALLBACK = (
    "What specific food items would you like to order? "
    "We have South Indian specialties like Dosa, Idli, and more."
)

TOPIC_REPLIES = (
    (
        ("diabetes", "diabetic"),
        "For people with diabetes, I recommend lower carb options like Rasam, Vegetable Curry without rice, "
        "or small portions of Idli. These items have a lower glycemic index.",
    ),
    (
        ("recommend", "suggestion", "popular"),
        "Based on our most popular items, I recommend Masala Dosa, Hyderabadi Biryani, and Filter Coffee. "
        "These are customer favorites!",
    ),
    (
        ("vegetarian", "veg"),
        "We have many vegetarian options! Our Masala Dosa, Idli Sambar, and Pongal are excellent "
        "vegetarian choices that are very popular.",
    ),
    (
        ("spicy",),
        "If you enjoy spicy food, try our Chettinad Chicken Curry, Bisi Bele Bath, or our spicy Masala Dosa. "
        "These are known for their vibrant flavors and heat!",
    ),
)

DEFAULT_REPLY = (
    "I can help you find food items, make recommendations based on dietary preferences, "
    "or answer questions about our menu. Is there something specific you're looking for?"
)


class AssistantError(ValueError):
    pass


def _mentions(text: str, words) -> bool:
    return any(word in text for word in words)


def assistant_reply(message) -> str:
    if not isinstance(message, str) or not message.strip():
        raise AssistantError("No message provided")

    text = message.lower()

    if _mentions(text, ORDER_INTENT_WORDS):
        for words, reply in ORDER_REPLIES:
            if _mentions(text, words):
                return reply
        return ORDER_FALLBACK

    for words, reply in TOPIC_REPLIES:
        if _mentions(text, words):
            return reply

    return DEFAULT_REPLY
