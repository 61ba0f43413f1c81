import numpy as np
import pandas as pd # type: ignore
import sympy as sp  # type: ignore
from typing import List, Optional, Any


def mat2DF(mat, column_names: Optional[List[str]]=None, row_names: Optional[List[str]]=None)->pd.DataFrame:
    """
    Converts a numpy ndarray or array-like to a DataFrame.

    Parameters
    ----------
    mat: np.Array, DataFrame
    column_names: list-str
    row_names: list-str
    """
    if isinstance(mat, pd.DataFrame):
        return mat
    mat = np.asarray(mat)
    if len(np.shape(mat)) == 1:
        mat = np.reshape(mat, (len(mat), 1))
    if column_names is not None and len(column_names) == 0:
        column_names = None
    if row_names is not None and len(row_names) == 0:
        row_names = None
    return pd.DataFrame(mat, columns=column_names, index=row_names)

def subsUsingName(expr: Any, subs_dct: dict)->Any:
    """
    Substitute values into a sympy expression or matrix using a dictionary keyed by name.

    Parameters
    ----------
    expr: sp.Expr, sp.Matrix
    subs_dct: dict
        Dictionary mapping strings to values

    Returns
    -------
    Any
    """
    symbols = expr.free_symbols
    str_to_symbol = {str(s): s for s in symbols}
    actual_subs_dct = {str_to_symbol[k]: v for k, v in subs_dct.items() if k in str_to_symbol}
    return expr.subs(actual_subs_dct)
