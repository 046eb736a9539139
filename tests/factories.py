"""
Тестовые данные: форма заказа, позиции
"""

STAFF_ACTOR = "werkstatt@kletterschuhe.de"

CUSTOMER = {
    "salutation": "Frau",
    "first_name": "Lena",
    "last_name": "Berger",
    "street": "Hauptstraße",
    "house_number": "12a",
    "zip": "80331",
    "city": "München",
    "country": "DE",
    "phone": "+49 170 1234567",
    "email": "lena.berger@example.com",
    "delivery_same": True,
    "gdpr_accepted": True,
    "agb_accepted": True,
    "newsletter": False,
}

# 32 (Vibram XS Grip) + 19 (Randgummi) + 20 (Verschluss) = 71 € pro Paar
PAIR_ITEM = {
    "quantity": "1",
    "manufacturer": "La Sportiva",
    "model": "Solution",
    "color": "gelb",
    "size": "41.5",
    "sole": "vibram_xs_grip",
    "edge_rubber": "YES",
    "closure": True,
    "disinfection": False,
    "trust_professionals": False,
}

SINGLE_SHOE_ITEM = {**PAIR_ITEM, "quantity": "0.5", "model": "Skwama"}

DELEGATED_ITEM = {
    "quantity": "1",
    "manufacturer": "Scarpa",
    "model": "Instinct VS",
    "size": "42",
    "sole": None,
    "edge_rubber": None,
    "trust_professionals": True,
}
