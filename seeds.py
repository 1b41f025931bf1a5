from rental_pricing.models.store import Store


def ensure_car(store: Store, car_id: str, brand: str, model: str, daily, weekly, monthly):
    """
    Ensure a car with `car_id` exists in the store.
    - If exists: update its rate card (idempotent).
    - If not:   create it.
    """
    if store.update_car(car_id, {"daily_rate": str(daily), "weekly_rate": str(weekly),
                                 "monthly_rate": str(monthly)}):
        return car_id
    return store.create_car({
        "car_id": car_id, "brand": brand, "model": model,
        "daily_rate": daily, "weekly_rate": weekly, "monthly_rate": monthly,
    })


def main():
    store = Store.instance(persist=True)

    # ---- Demo cars ----
    ensure_car(store, "1", "Toyota", "Camry", "100.00", "600.00", "2000.00")
    ensure_car(store, "2", "Hyundai", "Accent", "80.00", "500.00", "1700.00")
    ensure_car(store, "3", "Nissan", "Patrol", "350.00", "2200.00", "7500.00")

    # ---- Demo extras (create only if none exist) ----
    if not store.extras:
        store.create_extra({"extra_id": "1", "name": "GPS", "daily_price": "20.00",
                            "weekly_price": "120.00", "monthly_price": "400.00"})
        store.create_extra({"extra_id": "2", "name": "Child Seat", "daily_price": "15.00",
                            "weekly_price": "90.00", "monthly_price": "300.00"})
        store.create_extra({"extra_id": "3", "name": "Additional Driver", "daily_price": "25.00"})

    # ---- Loyalty and promo demo data ----
    store.set_loyalty_balance("demo-user", 1500)
    if not store.promo_codes:
        store.create_promo("WELCOME10", percentage="10", description="Welcome offer")
        store.create_promo("FLAT50", amount="50", description="50 off")

    store.save()

    print("Seed complete.")
    print(f"Cars: {len(store.cars)}, extras: {len(store.extras)}, promo codes: {len(store.promo_codes)}")
    print("Loyalty demo user: demo-user (1500 points)")


if __name__ == "__main__":
    main()
