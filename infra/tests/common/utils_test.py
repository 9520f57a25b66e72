from scorer_infra.common.utils import coalesce, deepmerge, to_camel


def test_coalesce():
    assert coalesce(None, 0, 1) == 0
    assert coalesce(None, None) is None


def test_deepmerge():
    defaults = {
        'alarmPeriodSeconds': 3600,
        'environment': {'DEBUG': 'off'},
        'secretKeys': ['SECRET_KEY'],
    }

    merged = deepmerge(defaults, {
        'alarmPeriodSeconds': None,
        'environment': {'S3_BUCKET': 'dumps'},
        'secretKeys': ['DATABASE_URL'],
    }, {'name': 'WeeklyDataDump'})

    assert defaults['environment'] == {'DEBUG': 'off'}
    assert merged == {
        'alarmPeriodSeconds': 3600,
        'environment': {'DEBUG': 'off', 'S3_BUCKET': 'dumps'},
        'secretKeys': ['DATABASE_URL'],
        'name': 'WeeklyDataDump',
    }


def test_deepmerge_without_ignoring_none():
    assert deepmerge({'cpu': 1024}, {'cpu': None}, ignore_none=False) == {'cpu': None}


def test_to_camel():
    assert to_camel('ephemeral_storage_size_in_gib') == 'ephemeralStorageSizeInGib'
    assert to_camel('cpu') == 'cpu'
