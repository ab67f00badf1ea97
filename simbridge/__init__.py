"""Command adapters that drive an iOS simulator through xcrun simctl and idb."""
