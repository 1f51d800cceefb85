ESSENTIAL_KEYWORDS = ['refrigerator', 'fridge', 'washing', 'microwave', 'oven', 'stove']

POPULAR_KEYWORDS = ['vacuum', 'cleaner', 'dishwasher', 'dryer', 'air', 'fan', 'heater']

PAYMENT_METHODS = {
    'credit': "Credit Card",
    'debit': "Debit Card",
    'bank': "Bank Transfer",
}
CARD_PAYMENT_METHODS = ('credit', 'debit')

BANK_TRANSFER_DETAILS = {
    'bankName': "AppliRent Services",
    'accountNumber': "1234 5678 9012",
    'iban': "OM12 1234 5678 9012 3456",
}

DELIVERY_TIME_SLOTS = {
    'morning': "Morning (9 AM - 12 PM)",
    'afternoon': "Afternoon (12 PM - 5 PM)",
    'evening': "Evening (5 PM - 8 PM)",
}
DEFAULT_DELIVERY_TIME = 'morning'

# Fields the delivery form requires; preferredTime is pre-selected, message optional.
DELIVERY_REQUIRED_FIELDS = ('area', 'city', 'street', 'number', 'zipCode', 'phone')

DELIVERY_TIMELINE = [
    {'step': 1, 'title': "Order Confirmed", 'description': "We receive your order details",
     'icon': "✓", 'time': "Today, 10:00 AM"},
    {'step': 2, 'title': "Processing", 'description': "Preparing your appliance for delivery",
     'icon': "⚙️", 'time': "Today, 10:30 AM"},
    {'step': 3, 'title': "Quality Check", 'description': "Final inspection and packaging",
     'icon': "🔍", 'time': "Today, 11:30 AM"},
    {'step': 4, 'title': "On the Way", 'description': "Out for delivery to your location",
     'icon': "🚚", 'time': "Tomorrow, 9:00 AM"},
    {'step': 5, 'title': "Delivered", 'description': "At your doorstep within 2 days",
     'icon': "🏠", 'time': "Tomorrow, 2:00 PM"},
]

DELIVERY_SUCCESS_MESSAGE = "Your order's on its way! 📦✨ We'll have it at your door soon."

FEEDBACK_MIN_RATING = 1
FEEDBACK_MAX_RATING = 5
ANONYMOUS_USER = 'Anonymous'

GENDERS = ('male', 'female')
