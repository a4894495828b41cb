'''
Batch analysis utilities.

Import directly to avoid RuntimeWarning when running with the -m flag:
  from garp.analysis.batch import run_batch
'''
