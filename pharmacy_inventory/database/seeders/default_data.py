# name, generic, category, sale price, unit cost, stock
DEFAULT_PRODUCTS = [
    ("Paracetamol 500mg", "Acetaminophen", "Pain Relief", 5.99, 3.50, 150),
    ("Amoxicillin 250mg", "Amoxicillin", "Antibiotics", 12.50, 8.75, 80),
    ("Ibuprofen 400mg", "Ibuprofen", "Pain Relief", 8.75, 5.25, 120),
    ("Cetirizine 10mg", "Cetirizine", "Allergy", 6.25, 4.50, 95),
    ("Vitamin C 1000mg", "Ascorbic Acid", "Supplements", 15.99, 12.99, 200),
]


def seed(conn):
    # only seed an empty catalog; safe to run on every start
    row = conn.execute("SELECT COUNT(*) FROM products").fetchone()
    if row and row[0] == 0:
        conn.executemany("""
            INSERT INTO products(name, generic_name, category, sale_price, unit_cost, stock_quantity)
            VALUES (?, ?, ?, ?, ?, ?)
        """, DEFAULT_PRODUCTS)
        conn.commit()
