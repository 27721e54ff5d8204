"""
Tests for text dependent encryption.
"""

import numpy as np
import pytest

from chaoscrypt.core.chaotic_map import LogarithmicMap, LogisticMap
from chaoscrypt.core.cipher import TextDependentCipher
from chaoscrypt.core.errors import (
    CiphertextFormatError,
    DimensionMismatchError,
    SymbolUnreachableError,
)
from chaoscrypt.core.key import Key


class TestScenario:
    """Two uncoupled nodes, logarithmic map b=0.5, state [0.3, -0.2]."""

    def test_single_byte_count(self, scenario_key):
        cipher = TextDependentCipher(scenario_key, False, LogarithmicMap(0.5), codec="int")
        # 0x01 (node 0 positive, node 1 not) first shows up at step 4
        assert cipher.encrypt(b"\x01") == [4]

    def test_reproducible_across_instances(self, scenario_key):
        first = TextDependentCipher(scenario_key).encrypt(b"\x01")
        second = TextDependentCipher(Key([0.3, -0.2], np.eye(2))).encrypt(b"\x01")
        assert first == second == b"\x04\x00"

    def test_decrypt_count(self, scenario_key):
        cipher = TextDependentCipher(scenario_key, codec="int")
        assert cipher.decrypt([4]) == b"\x01"

    def test_first_step_symbol(self, scenario_key):
        # Both nodes negative after one step
        cipher = TextDependentCipher(scenario_key, codec="int")
        assert cipher.encrypt(b"\x00") == [1]


class TestRoundTrip:

    def test_two_node_symbols(self, scenario_key):
        plaintext = bytes([0, 1, 2, 3, 3, 2, 1, 0, 1, 1, 2, 2])
        cipher = TextDependentCipher(scenario_key)
        assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext

    def test_coupled_network(self, coupled_key):
        plaintext = bytes([5, 0, 7, 7, 1, 6, 2, 3, 4])
        cipher = TextDependentCipher(coupled_key, codec="int")
        counts = cipher.encrypt(plaintext)
        assert len(counts) == len(plaintext)
        assert all(c >= 1 for c in counts)
        assert cipher.decrypt(counts) == plaintext

    def test_full_byte_range(self, byte_key):
        plaintext = b"Hello, chaos!" + bytes(range(0, 256, 17))
        cipher = TextDependentCipher(byte_key)
        ciphertext = cipher.encrypt(plaintext)
        assert len(ciphertext) == 2 * len(plaintext)
        assert cipher.decrypt(ciphertext) == plaintext

    @pytest.mark.parametrize("perturb", [False, True])
    def test_perturbation_setting(self, coupled_key, perturb):
        plaintext = bytes([3, 3, 3, 6, 6, 0])
        cipher = TextDependentCipher(coupled_key, perturb)
        assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext

    def test_scaling_perturbation(self, coupled_key):
        # A factor other than -1 moves the logarithmic map off its symmetric orbit
        plaintext = bytes([1, 1, 4, 4, 2])
        cipher = TextDependentCipher(coupled_key, True, perturbation_factor=0.5)
        assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext

    def test_other_local_map(self, scenario_key):
        plaintext = bytes([2, 1, 0, 3])
        cipher = TextDependentCipher(scenario_key, False, LogisticMap(2.0))
        assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext

    def test_accepts_int_iterables(self, scenario_key):
        cipher = TextDependentCipher(scenario_key, codec="int")
        assert cipher.encrypt([1]) == cipher.encrypt(bytearray(b"\x01"))

    def test_numpy_int_array(self, scenario_key):
        cipher = TextDependentCipher(scenario_key, codec="int")
        counts = cipher.encrypt(np.array([1, 0]))
        assert len(counts) == 2
        assert counts == cipher.encrypt(b"\x01\x00")
        assert cipher.decrypt(counts) == b"\x01\x00"

    @pytest.mark.parametrize("plaintext", [np.array([1.0, 0.0]), np.array([[1, 0], [0, 1]]), [1, 256], [-1]])
    def test_rejects_non_byte_iterables(self, scenario_key, plaintext):
        with pytest.raises(TypeError):
            TextDependentCipher(scenario_key).encrypt(plaintext)

    def test_empty(self, scenario_key):
        cipher = TextDependentCipher(scenario_key)
        assert cipher.encrypt(b"") == b""
        assert cipher.decrypt(b"") == b""
        assert TextDependentCipher(scenario_key, codec="int").encrypt(b"") == []


class TestDeterminism:

    def test_same_inputs_same_ciphertext(self, coupled_key):
        plaintext = bytes([1, 2, 3, 4, 5, 6, 7, 0])
        assert (
            TextDependentCipher(coupled_key, True).encrypt(plaintext)
            == TextDependentCipher(coupled_key, True).encrypt(plaintext)
        )

    def test_each_call_resets_the_network(self, coupled_key):
        first, second = bytes([7, 1, 4]), bytes([2, 2, 5, 0])
        reused = TextDependentCipher(coupled_key)
        reused.encrypt(first)
        assert reused.encrypt(second) == TextDependentCipher(coupled_key).encrypt(second)

    def test_decrypt_after_encrypt_on_same_instance(self, coupled_key):
        cipher = TextDependentCipher(coupled_key, codec="int")
        counts = cipher.encrypt(bytes([6, 5, 4]))
        cipher.encrypt(bytes([1, 1, 1, 1]))
        assert cipher.decrypt(counts) == bytes([6, 5, 4])

    def test_perturb_flips_state_after_each_symbol(self, scenario_key):
        cipher = TextDependentCipher(scenario_key, True, codec="int")
        cipher.encrypt(b"\x01")
        # Step 4 state is (0.839.., -4.92..); the match is followed by the flip
        state = cipher.cmn.get_state()
        assert state[0] < 0 and state[1] > 0


class TestErrors:

    def test_symbol_outside_network_range(self, scenario_key):
        cipher = TextDependentCipher(scenario_key)
        with pytest.raises(SymbolUnreachableError) as exc_info:
            cipher.encrypt(bytes([1, 4]))
        assert exc_info.value.symbol == 4
        assert exc_info.value.position == 1

    def test_iteration_ceiling(self, scenario_key):
        cipher = TextDependentCipher(scenario_key, max_iterations=1)
        assert cipher.encrypt(b"\x00") == b"\x01\x00"
        with pytest.raises(SymbolUnreachableError):
            cipher.encrypt(b"\x03")

    def test_forbidden_symbol(self, scenario_key):
        # 1 - 0.5x^2 settles on a positive fixed point: only 0b11 ever appears
        cipher = TextDependentCipher(scenario_key, False, LogisticMap(0.5), max_iterations=500)
        assert cipher.encrypt(b"\x03") == b"\x01\x00"
        with pytest.raises(SymbolUnreachableError):
            cipher.encrypt(b"\x00")

    def test_ceiling_above_encoding_width(self, scenario_key):
        with pytest.raises(ValueError):
            TextDependentCipher(scenario_key, max_iterations=70000)
        assert TextDependentCipher(scenario_key, max_iterations=70000, codec="int").max_iterations == 70000

    def test_inconsistent_key(self):
        with pytest.raises(DimensionMismatchError):
            TextDependentCipher(Key([0.1, 0.2], np.eye(3)))

    def test_too_many_nodes(self):
        with pytest.raises(DimensionMismatchError):
            TextDependentCipher(Key(np.linspace(0.1, 0.9, 9), np.eye(9)))

    def test_odd_ciphertext(self, scenario_key):
        with pytest.raises(CiphertextFormatError):
            TextDependentCipher(scenario_key).decrypt(b"\x04\x00\x01")

    def test_negative_count(self, scenario_key):
        with pytest.raises(CiphertextFormatError):
            TextDependentCipher(scenario_key).decrypt_counts([2, -1])

    def test_count_above_ceiling(self, scenario_key):
        cipher = TextDependentCipher(scenario_key, codec="int", max_iterations=5)
        assert len(cipher.decrypt([5])) == 1
        with pytest.raises(CiphertextFormatError):
            cipher.decrypt([300000])

    def test_str_plaintext(self, scenario_key):
        with pytest.raises(TypeError):
            TextDependentCipher(scenario_key).encrypt("text")
