from datetime import datetime, timedelta, timezone

from backoffice.services.inventory_records import InventoryRecord

_SEED_EPOCH = datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc)

# sku, name, category, brand, location, cost, rrp, stock, low stock threshold
_DEMO_ITEMS = (
    ("SCR-01", "Screwdriver Set", "Tools", "Stanley", "Warehouse A", 12.5, 24.99, 40, 10),
    ("HM-02", "Claw Hammer", "Tools", "Estwing", "Warehouse A", 18.0, 34.95, 22, 5),
    ("WR-03", "Adjustable Wrench", "Tools", "Bahco", "Shop Floor", 14.2, 27.5, 4, 5),
    ("DR-10", "Cordless Drill 18V", "Power Tools", "Makita", "Warehouse A", 89.0, 169.0, 8, 3),
    ("SW-11", "Circular Saw", "Power Tools", "DeWalt", "Warehouse B", 112.0, 219.0, 2, 2),
    ("SD-12", "Random Orbit Sander", "Power Tools", "Bosch", "Shop Floor", 64.0, 119.0, 6, 2),
    ("CB-20", "Extension Cable 10m", "Electrical", "HPM", "Warehouse B", 9.8, 19.95, 55, 15),
    ("LB-21", "LED Bulb 9W", "Electrical", "Philips", "Shop Floor", 2.1, 5.49, 180, 50),
    ("SWT-22", "Light Switch", "Electrical", "Clipsal", "Warehouse B", 3.4, 8.5, 3, 20),
    ("PP-30", "PVC Pipe 20mm", "Plumbing", "Iplex", "Warehouse B", 4.5, 9.9, 70, 20),
    ("TP-31", "Plumbing Tape", "Plumbing", "Teflon", "Shop Floor", 0.6, 2.49, 240, 40),
    ("VL-32", "Ball Valve 15mm", "Plumbing", "Reliance", "Warehouse A", 7.3, 15.0, 12, 10),
    ("NL-40", "Nails 50mm (1kg)", "Fasteners", "Otter", "Warehouse A", 5.2, 11.5, 95, 25),
    ("SC-41", "Wood Screws 8g (200)", "Fasteners", "Zenith", "Shop Floor", 6.0, 13.95, 64, 20),
    ("BL-42", "Hex Bolts M10 (50)", "Fasteners", "Bremick", "Warehouse B", 8.9, 18.0, 0, 10),
    ("PT-50", "Interior Paint 4L", "Paint", "Dulux", "Warehouse A", 38.0, 74.0, 18, 6),
    ("PB-51", "Paint Brush 50mm", "Paint", "Monarch", "Shop Floor", 4.1, 9.5, 45, 12),
    ("RL-52", "Paint Roller Kit", "Paint", "Uni-Pro", "Shop Floor", 11.0, 22.0, 9, 8),
    ("HS-60", "Garden Hose 15m", "Garden", "Hoselink", "Warehouse B", 21.0, 44.0, 14, 5),
    ("SP-61", "Garden Spade", "Garden", "Cyclone", "Warehouse A", 19.5, 39.0, 11, 4),
    ("GL-62", "Work Gloves", "Safety", "Ansell", "Shop Floor", 3.3, 7.95, 120, 30),
    ("GG-63", "Safety Glasses", "Safety", "3M", "Shop Floor", 4.0, 9.9, 75, 20),
    ("MS-64", "Dust Mask P2 (10)", "Safety", "3M", "Warehouse B", 9.0, 19.5, 5, 10),
    ("TM-70", "Tape Measure 8m", "Measuring", "Stanley", "Shop Floor", 8.2, 17.95, 33, 10),
    ("LV-71", "Spirit Level 600mm", "Measuring", "Stabila", "Warehouse A", 24.0, 49.0, 7, 4),
)


def demo_inventory():
    """Fresh demo inventory, newest first."""
    records = []
    for idx, (sku, name, category, brand, location, cost, rrp, stock, threshold) in enumerate(_DEMO_ITEMS):
        added = _SEED_EPOCH + timedelta(days=idx)
        records.append(
            InventoryRecord(
                id=f"demo-{idx + 1:04d}",
                sku=sku,
                name=name,
                category=category,
                brand=brand,
                supplier=brand,
                location=location,
                cost=cost,
                rrp=rrp,
                stock=stock,
                low_stock_threshold=threshold,
                barcode=f"93{idx + 1:011d}",
                date_added=added,
                last_updated=added,
            )
        )
    records.reverse()
    return records


__all__ = ["demo_inventory"]
