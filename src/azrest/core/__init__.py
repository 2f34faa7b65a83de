"""
This is a miniaturized version of the Azure SDK for python
(https://github.com/Azure/azure-sdk-for-python). It contains the shared HTTP pipeline,
credentials, error handling and model helpers used by every service package, and should
contain no service-specific code.
"""
