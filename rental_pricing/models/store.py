"""
In-memory catalogue/booking/loyalty store with optional pickle persistence.

This is the default collaborator behind the pricing core: car and extra
lookups, bookings for the availability gate, loyalty balances and promo codes.
The pricing core only reads from it.
"""
import logging
import os
import pickle
import threading
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)

# ---- Paths ----
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DATA_PATH = BASE_DIR / "data.pkl"

_SECTIONS = ("cars", "extras", "bookings", "loyalty", "promo_codes")


class Store:
    _inst = None
    _inst_lock = threading.Lock()

    def __init__(self, path: str | os.PathLike | None = None, persist: bool = False):
        self.path = str(path or DEFAULT_DATA_PATH)
        self.persist = persist
        self.cars: dict[str, dict] = {}
        self.extras: dict[str, dict] = {}
        self.bookings: dict[str, dict] = {}
        self.loyalty: dict[str, int] = {}
        self.promo_codes: dict[str, dict] = {}
        self._rw = threading.RLock()

        if self.persist:
            logger.info("[Store] Using file: %s", self.path)
            self._load()

    # ---------- Singleton ----------
    @classmethod
    def instance(cls, path: str | os.PathLike | None = None, persist: bool = False):
        """Return the global singleton instance of Store."""
        with cls._inst_lock:
            if cls._inst is None:
                cls._inst = Store(path, persist=persist)
        return cls._inst

    @classmethod
    def reset_instance(cls):
        with cls._inst_lock:
            cls._inst = None

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError) as e:
            logger.warning("[Store] Load failed (%s); starting empty.", e)
            return

        if not isinstance(data, dict):
            logger.warning("[Store] Incompatible store (%s); starting empty.", type(data).__name__)
            return
        for section in _SECTIONS:
            setattr(self, section, data.get(section, {}) or {})
        logger.info("[Store] Loaded: cars=%d, extras=%d, bookings=%d",
                    len(self.cars), len(self.extras), len(self.bookings))

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        if not self.persist:
            return
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        tmp = self.path + ".tmp"
        payload = {section: getattr(self, section) for section in _SECTIONS}
        with open(tmp, "wb") as f:
            pickle.dump(payload, f, protocol=pickle.HIGHEST_PROTOCOL)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)

    def save(self):
        """Thread-safe save method."""
        with self._rw:
            self._dump()

    def clear(self):
        with self._rw:
            for section in _SECTIONS:
                getattr(self, section).clear()

    # ---------- Cars ----------
    def create_car(self, data: dict) -> str:
        """Create a car with its rate card and return its ID."""
        with self._rw:
            cid = str(data.get("car_id") or uuid.uuid4())
            self.cars[cid] = {
                "car_id": cid,
                "brand": data.get("brand", ""),
                "model": data.get("model", ""),
                "daily_rate": str(data.get("daily_rate") or 0),
                "weekly_rate": str(data.get("weekly_rate") or 0),
                "monthly_rate": str(data.get("monthly_rate") or 0),
            }
            self._dump()
            return cid

    def get_car(self, car_id) -> dict | None:
        """Get car information by ID."""
        return self.cars.get(str(car_id))

    def update_car(self, car_id, updates: dict) -> bool:
        """Update fields of an existing car; False if there is no such car."""
        with self._rw:
            c = self.cars.get(str(car_id))
            if not c:
                return False
            c.update(updates)
            self._dump()
            return True

    # ---------- Extras ----------
    def create_extra(self, data: dict) -> str:
        with self._rw:
            eid = str(data.get("extra_id") or uuid.uuid4())
            self.extras[eid] = {
                "extra_id": eid,
                "name": data.get("name", ""),
                "daily_price": str(data.get("daily_price") or 0),
                "weekly_price": None if data.get("weekly_price") is None else str(data["weekly_price"]),
                "monthly_price": None if data.get("monthly_price") is None else str(data["monthly_price"]),
                "is_active": data.get("is_active", True),
            }
            self._dump()
            return eid

    def get_extras(self, extra_ids) -> list[dict]:
        """Active extras for the given IDs; unknown or inactive IDs are left out."""
        out = []
        for eid in dict.fromkeys(str(i) for i in extra_ids):
            e = self.extras.get(eid)
            if e and e.get("is_active", True):
                out.append(e)
        return out

    # ---------- Bookings ----------
    def create_booking(self, b: dict) -> str:
        """Create a booking record."""
        with self._rw:
            bid = str(b.get("booking_id") or uuid.uuid4())
            b = dict(b)
            b["booking_id"] = bid
            b["car_id"] = str(b.get("car_id"))
            self.bookings[bid] = b
            self._dump()
            return bid

    def bookings_for_car(self, car_id) -> list[dict]:
        cid = str(car_id)
        with self._rw:
            return [b for b in self.bookings.values() if str(b.get("car_id")) == cid]

    # ---------- Loyalty ----------
    def set_loyalty_balance(self, user_id: str, points: int):
        with self._rw:
            self.loyalty[str(user_id)] = int(points)
            self._dump()

    def loyalty_balance(self, user_id) -> int:
        """Available points for a user; 0 for users with no ledger entry."""
        return int(self.loyalty.get(str(user_id), 0))

    # ---------- Promo codes ----------
    def create_promo(self, code: str, percentage=None, amount=None, description: str = ""):
        with self._rw:
            self.promo_codes[code.strip().upper()] = {
                "code": code.strip().upper(),
                "percentage": None if percentage is None else str(percentage),
                "amount": None if amount is None else str(amount),
                "description": description,
                "is_active": True,
            }
            self._dump()

    def get_promo(self, code: str) -> dict | None:
        p = self.promo_codes.get((code or "").strip().upper())
        if p and p.get("is_active", True):
            return p
        return None
