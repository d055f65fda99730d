"""Host adapters for the cursor tracker."""
