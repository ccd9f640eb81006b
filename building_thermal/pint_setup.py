import pint

UNITS = pint.UnitRegistry()
Quantity = UNITS.Quantity

unit_definitions = [
    'fraction = [] = frac',
    'percent = 1e-2 frac = % = pct',
    'air_changes_per_hour = 1 / hour = ach'
]
for ud in unit_definitions:
    UNITS.define(ud)

pint.set_application_registry(UNITS)
