from freezegun.api import FakeDatetime
import yaml
from yaml.representer import SafeRepresenter


def pytest_configure():
    # notes created under freeze_time carry FakeDatetime due dates, which DirectRepo writes with safe_dump
    yaml.add_representer(FakeDatetime, SafeRepresenter.represent_datetime, Dumper=yaml.SafeDumper)
