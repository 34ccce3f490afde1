"""Shared fixtures for formknobs_validation tests."""

import asyncio

import pytest

from formknobs_validation import FormModel


@pytest.fixture
def model():
    """Fresh model for each test."""
    return FormModel()


@pytest.fixture
def calls():
    """List that recording predicates append to."""
    return []


@pytest.fixture
def recorder(calls):
    """Build test functions that record their label and return a fixed result."""

    def make(label, result=True):
        def fn(value, context):
            calls.append(label)
            return result

        return fn

    return make


@pytest.fixture
def async_recorder(calls):
    """Like recorder, but the test functions are coroutines."""

    def make(label, result=True):
        async def fn(value, context):
            await asyncio.sleep(0)
            calls.append(label)
            return result

        return fn

    return make
