"""
reset_data.py
-------------
Utility script to clear all stored data (users, vehicles, bookings, payments)
from the pickle file named by DATA_PATH.

This script is designed for development and testing purposes.

Usage:
    $ DATA_PATH=data.pkl python reset_data.py

After running this script, you can repopulate sample data by executing:
    $ DATA_PATH=data.pkl python seeds.py
"""

from rental_api.config import Config
from rental_api.models.store import Store


def main():
    """Clear every collection and save the empty store back to disk."""
    if not Config.DATA_PATH:
        print("DATA_PATH is not set; nothing to reset.")
        return

    store = Store(Config.DATA_PATH, timeout=Config.STORAGE_TIMEOUT)
    store.clear()

    print(f"{Config.DATA_PATH} has been cleared.")
    print("Tip: run `python seeds.py` to regenerate demo data.")


if __name__ == "__main__":
    main()
