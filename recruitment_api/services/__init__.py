"""
Service layer.

Services own business rules and the create/update hook sequences; data
access goes through repositories obtained from the request's UnitOfWork.
"""
