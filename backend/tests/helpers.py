API = "/api/v1"
PASSWORD = "Password1!"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def skip_first_call(monkeypatch, cls, name: str, result):
    """Make ``cls.name`` return ``result`` once, then behave normally."""
    original = getattr(cls, name)
    calls = []

    def wrapper(self, *args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            return result
        return original(self, *args, **kwargs)

    monkeypatch.setattr(cls, name, wrapper)
    return calls
