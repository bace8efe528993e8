"""School attendance package.

Organized by feature modules (holidays, attendance, reports, promotion, ...)
with a thin Flask controller layer over service/repository layers.
"""
