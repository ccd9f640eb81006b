from .glazing import Glazing
