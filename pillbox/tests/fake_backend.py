"""In-memory stand-in for the Supabase client used by the tests.

Implements the subset of the query builder the repositories call:
``table().select/insert/update/delete/upsert`` with ``eq``, ``gte``, ``lte``,
``in_``, ``order``, ``limit`` and ``execute``, plus a minimal ``auth``.
"""
import copy
import itertools
import threading
from types import SimpleNamespace

from postgrest.exceptions import APIError


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.op = None
        self.payload = None
        self.on_conflict = None
        self.filters = []
        self.order_by = None
        self.limit_to = None

    # --- operations ---
    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def upsert(self, payload, on_conflict=""):
        self.op, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    # --- filters ---
    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def in_(self, column, values):
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_to = count
        return self

    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def execute(self):
        return self.backend._execute(self)


class FakeAdmin:
    def __init__(self, auth):
        self.auth = auth

    def sign_out(self, jwt, scope="global"):
        self.auth.revoked.append((jwt, scope))
        self.auth.tokens.pop(jwt, None)


class FakeAuth:
    def __init__(self):
        self.tokens = {}
        self.magic_links = []
        self.revoked = []
        self.admin = FakeAdmin(self)

    def get_user(self, token):
        user_id = self.tokens.get(token)
        return SimpleNamespace(user=SimpleNamespace(id=user_id) if user_id else None)

    def sign_in_with_otp(self, credentials):
        self.magic_links.append(credentials["email"])


class FakeSupabase:
    def __init__(self):
        self.tables = {name: [] for name in ("profiles", "families", "meds", "stocks", "intake_logs")}
        self.calls = []
        self.failures = []
        self.auth = FakeAuth()
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def table(self, name):
        return FakeQuery(self, name)

    # --- test helpers ---
    def fail_when(self, predicate, message="backend unavailable"):
        """Raise an APIError for every call where predicate(table, op, payload) is true."""
        self.failures.append((predicate, message))

    def count_calls(self, table, op):
        return sum(1 for t, o in self.calls if t == table and o == op)

    def rows(self, table, **where):
        return [r for r in self.tables[table] if all(r.get(k) == v for k, v in where.items())]

    def add_user(self, token, user_id, email, family_id=None, role="member"):
        self.auth.tokens[token] = user_id
        self.tables["profiles"].append({"id": user_id, "email": email, "family_id": family_id, "role": role})

    # --- engine ---
    def _new_row(self, row):
        row = dict(row)
        row.setdefault("id", f"{next(self._ids)}")
        return row

    def _execute(self, query):
        with self._lock:
            self.calls.append((query.table, query.op))
            for predicate, message in self.failures:
                if predicate(query.table, query.op, query.payload):
                    raise APIError({"message": message, "code": "XX000", "hint": None, "details": None})
            rows = self.tables[query.table]

            if query.op == "insert":
                payload = query.payload if isinstance(query.payload, list) else [query.payload]
                created = [self._new_row(r) for r in payload]
                rows.extend(created)
                return FakeResponse(copy.deepcopy(created))

            if query.op == "upsert":
                keys = [k.strip() for k in query.on_conflict.split(",") if k.strip()]
                existing = next((r for r in rows if all(r.get(k) == query.payload.get(k) for k in keys)), None)
                if existing is not None:
                    existing.update(query.payload)
                    return FakeResponse([copy.deepcopy(existing)])
                created = self._new_row(query.payload)
                rows.append(created)
                return FakeResponse([copy.deepcopy(created)])

            matched = [r for r in rows if query._matches(r)]
            if query.op == "update":
                for r in matched:
                    r.update(query.payload)
                return FakeResponse(copy.deepcopy(matched))
            if query.op == "delete":
                self.tables[query.table] = [r for r in rows if not query._matches(r)]
                return FakeResponse(copy.deepcopy(matched))

            if query.order_by:
                column, desc = query.order_by
                matched = sorted(matched, key=lambda r: r.get(column), reverse=desc)
            if query.limit_to is not None:
                matched = matched[:query.limit_to]
            return FakeResponse(copy.deepcopy(matched))


def seed_medication(fake, family_id, name, times, per_dose=1, threshold=10, on_hand=0, reserve=0,
                    dosage=None, archived=False, with_stock=True):
    """Insert a medication (and its two stock rows) directly into the fake backend."""
    med = fake._new_row({
        "family_id": family_id, "name": name, "dosage": dosage, "per_dose": per_dose,
        "times": list(times), "threshold": threshold, "archived": archived,
    })
    fake.tables["meds"].append(med)
    if with_stock:
        fake.tables["stocks"].append(fake._new_row({"med_id": med["id"], "location": "Box", "qty": on_hand}))
        fake.tables["stocks"].append(fake._new_row({"med_id": med["id"], "location": "Dispensa", "qty": reserve}))
    return med["id"]
