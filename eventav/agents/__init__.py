"""
Chat orchestrator for property-grounded AV consultation.

This package contains the LangGraph-based function-calling loop, the prompt
assembler with its static knowledge base, and the functions exposed to the model.
"""
