from rental_pricing.models.store import Store


def test_persistent_store_roundtrip(tmp_path):
    path = tmp_path / "data.pkl"
    st = Store(path, persist=True)
    st.create_car({"car_id": "7", "brand": "Kia", "model": "Rio",
                   "daily_rate": "90", "weekly_rate": "500", "monthly_rate": "1800"})
    st.set_loyalty_balance("u1", 42)

    again = Store(path, persist=True)
    assert again.get_car("7")["brand"] == "Kia"
    assert again.loyalty_balance("u1") == 42
    assert again.loyalty_balance("nobody") == 0


def test_in_memory_store_writes_nothing(tmp_path):
    path = tmp_path / "data.pkl"
    st = Store(path)
    st.create_car({"car_id": "7", "brand": "Kia", "model": "Rio"})
    st.save()
    assert not path.exists()


def test_inactive_extras_and_promos_are_hidden():
    st = Store()
    st.create_extra({"extra_id": "1", "name": "GPS", "daily_price": "20", "is_active": False})
    st.create_extra({"extra_id": "2", "name": "Seat", "daily_price": "15"})
    assert [e["extra_id"] for e in st.get_extras(["1", "2", "2", "3"])] == ["2"]

    st.create_promo("spring", percentage="5")
    assert st.get_promo(" SPRING ")["percentage"] == "5"
    st.promo_codes["SPRING"]["is_active"] = False
    assert st.get_promo("spring") is None


def test_update_car_persists_rates(tmp_path):
    path = tmp_path / "data.pkl"
    st = Store(path, persist=True)
    st.create_car({"car_id": "7", "brand": "Kia", "model": "Rio",
                   "daily_rate": "90", "weekly_rate": "500", "monthly_rate": "1800"})
    assert st.update_car("7", {"daily_rate": "95"})
    assert not st.update_car("8", {"daily_rate": "95"})

    again = Store(path, persist=True)
    assert again.get_car("7")["daily_rate"] == "95"
    assert again.get_car("7")["monthly_rate"] == "1800"
    assert again.get_car("8") is None
