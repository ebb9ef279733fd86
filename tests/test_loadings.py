"""
Tests for the loading matrix and input validation module.
"""

import pytest
import numpy as np
import pandas as pd
import sys
import os

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from qfactormath.errors import DataInconsistency, ValidationError
from qfactormath.models import Factor, Statement
from qfactormath.math.loadings import (
    load_factors, load_statements, validate_factors, resolve_statements,
    loading_array, loading_matrix
)


class TestLoadFactors:
    """Tests for building Factor records from raw input."""
    
    def test_from_dicts(self):
        """Test building factors from dictionaries."""
        factors = load_factors([
            {'id': 1, 'eigenvalue': 4.2, 'varianceExplained': 31.0, 'loadings': [0.5, -1.2]},
            {'id': 2, 'loadings': [0.1, 0.3]},
        ])
        
        assert [f.id for f in factors] == [1, 2]
        assert factors[0].variance_explained == 31.0
        assert factors[0].loadings == (0.5, -1.2)
        
        # Defaults
        assert factors[1].eigenvalue == 1.0
        assert factors[1].variance_explained is None
    
    def test_passes_factor_objects_through(self):
        """Test that Factor objects are kept as they are."""
        factor = Factor(id=7, loadings=[1.0, 2.0])
        assert load_factors([factor])[0] is factor
    
    def test_rejects_non_finite_loadings(self):
        """Test that NaN and infinite loadings are rejected."""
        with pytest.raises(ValidationError):
            load_factors([{'id': 1, 'loadings': [1.0, float('nan')]}])
        
        with pytest.raises(ValidationError):
            load_factors([{'id': 1, 'loadings': [float('inf')]}])
    
    def test_rejects_missing_id(self):
        """Test that a factor without an id is rejected."""
        with pytest.raises(ValidationError) as excinfo:
            load_factors([{'loadings': [1.0]}])
        
        assert 'position 0' in str(excinfo.value)
    
    def test_factors_are_frozen(self):
        """Test that factors cannot be modified after creation."""
        factor = Factor(id=1, loadings=[1.0])
        with pytest.raises(Exception):
            factor.id = 2


class TestLoadStatements:
    """Tests for building Statement records from raw input."""
    
    def test_none(self):
        """Test that None is passed through."""
        assert load_statements(None) is None
    
    def test_from_strings(self):
        """Test that plain strings are numbered from 1."""
        statements = load_statements(['First', 'Second'])
        
        assert [s.id for s in statements] == ['1', '2']
        assert [s.text for s in statements] == ['First', 'Second']
    
    def test_from_dicts_with_numeric_ids(self):
        """Test that numeric ids are turned into strings."""
        statements = load_statements([{'id': 10, 'text': 'Ten'}])
        
        assert statements[0].id == '10'
        assert statements[0].text == 'Ten'
    
    def test_rejects_missing_text(self):
        """Test that a statement without text is rejected."""
        with pytest.raises(ValidationError):
            load_statements([{'id': 1}])


class TestValidateFactors:
    """Tests for factor set consistency checks."""
    
    def test_empty(self):
        """Test that an empty factor set is valid."""
        assert validate_factors([]) == 0
    
    def test_statement_count(self):
        """Test that the statement count is returned."""
        factors = [Factor(id=1, loadings=[1, 2, 3]), Factor(id=2, loadings=[3, 2, 1])]
        assert validate_factors(factors) == 3
    
    def test_mismatched_lengths(self):
        """Test that unequal loading lengths name the offending factors."""
        factors = [
            Factor(id=1, loadings=[1, 2, 3]),
            Factor(id=2, loadings=[1, 2]),
            Factor(id=3, loadings=[1, 2, 3]),
            Factor(id=4, loadings=[1, 2, 3, 4]),
        ]
        
        with pytest.raises(DataInconsistency) as excinfo:
            validate_factors(factors)
        
        assert excinfo.value.factor_ids == [2, 4]
        assert '2, 4' in str(excinfo.value)
    
    def test_duplicate_ids(self):
        """Test that duplicate factor ids are rejected."""
        factors = [Factor(id=1, loadings=[1]), Factor(id=1, loadings=[2])]
        
        with pytest.raises(DataInconsistency) as excinfo:
            validate_factors(factors)
        
        assert excinfo.value.factor_ids == [1]


class TestResolveStatements:
    """Tests for lining statements up with loadings."""
    
    def test_placeholders(self):
        """Test that missing statements get placeholder texts."""
        factors = [Factor(id=1, loadings=[1, 2])]
        statements = resolve_statements(None, factors)
        
        assert [s.id for s in statements] == ['1', '2']
        assert [s.text for s in statements] == ['Statement 1', 'Statement 2']
    
    def test_count_mismatch(self):
        """Test that a statement list of the wrong length is rejected."""
        factors = [Factor(id=1, loadings=[1, 2, 3]), Factor(id=2, loadings=[3, 2, 1])]
        statements = [Statement(id='a', text='A'), Statement(id='b', text='B')]
        
        with pytest.raises(DataInconsistency) as excinfo:
            resolve_statements(statements, factors)
        
        assert excinfo.value.factor_ids == [1, 2]
    
    def test_duplicate_statement_ids(self):
        """Test that duplicate statement ids are rejected."""
        factors = [Factor(id=1, loadings=[1, 2])]
        statements = [Statement(id='a', text='A'), Statement(id='a', text='B')]
        
        with pytest.raises(DataInconsistency):
            resolve_statements(statements, factors)


class TestLoadingMatrix:
    """Tests for the loading matrix."""
    
    def test_loading_array(self, two_factors):
        """Test stacking loadings into an array."""
        values = loading_array(two_factors)
        
        assert values.shape == (2, 5)
        assert np.allclose(values[1], [2.5, 0.3, -0.1, -2.4, 2.6])
    
    def test_empty_array(self):
        """Test the array for an empty factor set."""
        assert loading_array([]).shape == (0, 0)
    
    def test_loading_matrix(self, two_factors, statements):
        """Test the labelled loading matrix."""
        matrix = loading_matrix(two_factors, statements)
        
        assert isinstance(matrix, pd.DataFrame)
        assert list(matrix.index) == [1, 2]
        assert list(matrix.columns) == ['1', '2', '3', '4', '5']
        assert matrix.loc[1, '5'] == -2.6
