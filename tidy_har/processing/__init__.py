"""
Tidy data pipeline for the UCI HAR dataset.

This package merges the train/test partitions, keeps the mean()/std()
features, labels activities, reshapes wide to long, and aggregates
per subject, activity and feature facets.
"""
