"""Ingredient line of a recipe: name, amount (free text, e.g. "1/2"), unit."""


class Ingredient:
    def __init__(self, name: str = "", amount: str = "", unit: str = ""):
        self.name = name
        # Amounts come from AI output and user input ("1", "1/2", "a pinch")
        self.amount = "" if amount is None else str(amount)
        self.unit = unit or ""

    def __str__(self) -> str:
        parts = [p for p in (self.amount, self.unit, self.name) if p]
        return " ".join(parts)

    __repr__ = __str__

    def __eq__(self, other):
        if not isinstance(other, Ingredient):
            return NotImplemented
        return (self.name, self.amount, self.unit) == (other.name, other.amount, other.unit)

    @staticmethod
    def from_dict(data):
        '''Creates an Ingredient from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        amount = d.get("amount", d.get("quantity", ""))
        return Ingredient(
            name=str(d.get("name", "") or "").strip(),
            amount=amount,
            unit=str(d.get("unit", "") or "").strip(),
        )

    def to_dict(self):
        return {"name": self.name, "amount": self.amount, "unit": self.unit}
