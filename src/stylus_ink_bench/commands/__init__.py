"""
Commands - click command implementations.

- run:      Measure the ink used by one program call
- calldata: Print the calldata for a signature and arguments
- trace:    Ink usage of an already mined transaction
- compare:  Comparison table of several methods across several programs
"""
