"""
reset_data.py
-------------
Utility script to clear all stored data (cars, extras, bookings, loyalty
balances, promo codes) from the local data.pkl file.

Usage:
    $ python reset_data.py

After running this script, you can repopulate sample data by executing:
    $ python seeds.py
"""

from rental_pricing.models.store import Store


def main():
    """Empty every section of the persistent store and save it back to `data.pkl`."""
    store = Store.instance(persist=True)
    store.clear()
    store.save()

    print("data.pkl has been cleared.")
    print("Tip: Run `python seeds.py` to regenerate demo data.")


if __name__ == "__main__":
    main()
