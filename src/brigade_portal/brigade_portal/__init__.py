"""Brigade Portal package.

The attendance and training-schedule synchronization core of the brigade
member portal, organized by feature modules (holidays, training, members,
attendance, sync) with a thin Flask controller layer over service/repository
layers.
"""
