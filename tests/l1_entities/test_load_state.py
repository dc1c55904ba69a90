"""Tests for the LoadState variants."""

from lazy_whisper.l1_entities.load_state import Loaded, Unloaded
from lazy_whisper.l1_entities.model_handle import ModelHandle


def test_unloaded_instances_compare_equal():
    assert Unloaded() == Unloaded()


def test_loaded_carries_handle():
    handle = ModelHandle(model=object(), model_name='tiny.en', sampling_rate=16000)
    state = Loaded(handle=handle)
    assert state.handle.sampling_rate == 16000
    assert state.handle.model_name == 'tiny.en'
