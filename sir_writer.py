"""
sir_writer.py
Registro diario de la simulacion SIR en CSV: una fila por dia con totales y
porcentajes por estado (S, I, R).

The default file name encodes the run parameters:
    SIR_<infection*1000>_<recovery*1000>_<maxDays>_<size>.csv
"""
import csv
import warnings

from sir_cell import HealthState


class LogWriterWarning(UserWarning):
    """The daily log could not be created or written."""


def default_filename(max_days, infection_rate, recovery_rate, size):
    return "SIR_%03d_%03d_%03d_%03d.csv" % (
        int(infection_rate * 1000), int(recovery_rate * 1000), max_days, size)


def header_row():
    row = ["Day"]
    for state in HealthState:
        row += ["%s (total)" % state.name, "%s (%%)" % state.name]
    return row


class DailyLogWriter:
    """Writes one CSV row per simulated day.

    Failures never stop the simulation: they are reported with a
    ``LogWriterWarning`` and later writes of the run are skipped.
    """

    def __init__(self, filename=None):
        self.filename = filename
        self._file = None
        self._writer = None

    @property
    def is_open(self):
        return self._writer is not None

    def open(self, max_days, infection_rate, recovery_rate, size):
        if not self.filename:
            self.filename = default_filename(max_days, infection_rate, recovery_rate, size)
        try:
            self._file = open(self.filename, "w", newline="")
            self._writer = csv.writer(self._file)
            self._writer.writerow(header_row())
        except OSError as e:
            warnings.warn("unable to create output file %s: %s" % (self.filename, e),
                          LogWriterWarning, stacklevel=2)
            self.close()
            return False
        print("Output file name:", self.filename)
        return True

    def update(self, day, totals, percentages):
        if self._writer is None:
            return
        row = [day]
        for total, pct in zip(totals, percentages):
            row += [total, pct]
        try:
            self._writer.writerow(row)
        except (OSError, ValueError) as e:
            warnings.warn("failed to record day %d: %s" % (day, e),
                          LogWriterWarning, stacklevel=2)
            self.close()

    def close(self):
        if self._file is not None:
            try:
                self._file.close()
            except OSError as e:
                warnings.warn("failed to close %s: %s" % (self.filename, e),
                              LogWriterWarning, stacklevel=2)
        self._file = None
        self._writer = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
