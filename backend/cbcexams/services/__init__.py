# Services package init
"""
CBC Exams Backend: Services Layer
===================================

What:  Business logic between routes (HTTP) and the database.
How:   Services receive the database session and result cache per call,
       apply the catalog rules and return response models.

Service Inventory:
    - SearchService: q1..q4 keyword search with progressive relaxation
    - DirectoryService: resources grouped by trimmed parent directory
    - ResultCache: TTL cache shared by the two services above
    - FeedbackService: contact-form submissions and admin listing
    - pagination: page/limit parsing and pagination metadata
    - categories: static level/subject taxonomy
"""
