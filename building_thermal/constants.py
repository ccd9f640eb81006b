"""Physical constants used throughout the package (SI units, floats)."""

# Stefan-Boltzmann constant, W / (m ** 2 * K ** 4)
SIGMA = 5.670374419e-8

# standard gravitational acceleration, m / s ** 2
G = 9.81

# offset between degC and K
T_ZERO = 273.15

# universal gas constant, J / (kmol * K)
R_UNIVERSAL = 8314.46261815324

# standard atmospheric pressure, Pa
P_STD = 101_325.0
