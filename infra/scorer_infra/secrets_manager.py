"""
Container environment and secret reference shapes, in the form ECS expects
them inside a container definition.
"""
from typing import Iterable, Mapping, TypedDict

import pulumi


class EnvironmentVar(TypedDict):
    name: str
    value: str


SecretRef = TypedDict('SecretRef', {'name': str, 'valueFrom': str})


def make_environment(values: Mapping[str, str]) -> list[EnvironmentVar]:
    return [
        EnvironmentVar(name=name, value=str(value)) for name, value in values.items()
    ]


def make_secret_ref(secret_arn: str, key: str) -> SecretRef:
    return {
        'name': key,
        'valueFrom': f"{secret_arn}:{key}::",
    }


def make_secret_refs(secret_arn: pulumi.Input[str],
        keys: Iterable[str]) -> pulumi.Output[list[SecretRef]]:
    key_list = list(keys)

    return pulumi.Output.from_input(secret_arn).apply(
        lambda arn: [make_secret_ref(arn, key) for key in key_list])
