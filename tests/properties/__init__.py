"""Property-based tests over random ownership trees and collapse sets."""
